"""
Farkle - Game History Manager

CRUD operations for the `game_history` table.
"""

from typing import Callable, TypeVar
import logging
import time

from httpx import RemoteProtocolError
from supabase import Client

from src.config.settings import get_settings
from src.database.client import get_supabase_client
from src.database.models import GameResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

TABLE_NAME = "game_history"


def _db_retry(
    fn: Callable[..., T],
    *args,
    retries: int = 2,
    delay: float = 0.3,
    on_retry: Callable[[], None] | None = None,
    **kwargs,
) -> T:
    """Call *fn* with simple retry on transient connection errors.

    ``on_retry`` runs after the client cache is cleared and before the next
    attempt, so callers holding a client can pick up the fresh one.
    """
    for attempt in range(retries + 1):
        try:
            return fn(*args, **kwargs)
        except (RemoteProtocolError, ConnectionError, OSError):
            if attempt == retries:
                raise
            logger.warning("Transient database error, retrying (%d/%d)", attempt + 1, retries)
            # Clear the cached client so the next call creates a fresh connection
            get_supabase_client.cache_clear()
            if on_retry is not None:
                on_retry()
            time.sleep(delay)
    raise RuntimeError("unreachable")


class GameHistoryManager:
    """Stores finished games in Supabase.

    Args:
        client: Connection to use; the cached ``get_supabase_client()`` when
            omitted or after a reconnect.
    """

    def __init__(self, client: Client | None = None) -> None:
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase_client()
        return self._client

    @property
    def table(self):
        return self.client.table(TABLE_NAME)

    def reconnect(self) -> None:
        """Drop the current connection; the next call uses a fresh client."""
        self._client = None

    def save(self, result: GameResult) -> GameResult:
        """Insert a finished game."""
        data = (
            self.table
            .insert(result.to_row())
            .execute()
        )
        return GameResult.model_validate(data.data[0])

    def record(self, result: GameResult) -> GameResult:
        """Insert a finished game, reconnecting on transient connection errors."""
        return _db_retry(self.save, result, on_retry=self.reconnect)

    def list_recent(self, limit: int | None = None) -> list[GameResult]:
        """Most recent games first, ``history_limit`` of them by default."""
        if limit is None:
            limit = get_settings().history_limit
        data = (
            self.table
            .select("*")
            .order("played_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [GameResult.model_validate(row) for row in data.data]

    def get(self, result_id: str) -> GameResult | None:
        """Look up a single game by its UUID."""
        data = (
            self.table
            .select("*")
            .eq("id", result_id)
            .execute()
        )
        if data.data:
            return GameResult.model_validate(data.data[0])
        return None

    def delete(self, result_id: str) -> None:
        """Delete a single game record."""
        self.table.delete().eq("id", result_id).execute()
