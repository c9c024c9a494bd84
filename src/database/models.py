"""
Farkle - Database Models

Pydantic models that mirror the Supabase table schemas.
"""

from datetime import datetime, timezone
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from src.engine.base import GameState


class GameResult(BaseModel):
    """Mirrors the `game_history` table."""

    id: UUID | None = None
    played_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    player_names: list[str] = Field(min_length=1)
    final_totals: list[int]
    winner_name: str | None = None

    model_config = {"from_attributes": True}

    @model_validator(mode="after")
    def _check_lengths(self) -> "GameResult":
        if len(self.player_names) != len(self.final_totals):
            raise ValueError("player_names and final_totals must have the same length.")
        return self

    @classmethod
    def from_game_state(cls, state: GameState, played_at: datetime | None = None) -> "GameResult":
        """Build the record for a finished game."""
        return cls(
            played_at=played_at or datetime.now(timezone.utc),
            player_names=list(state.player_names),
            final_totals=list(state.totals),
            winner_name=state.winner_name,
        )

    def to_row(self) -> dict:
        """Column values for an insert (the database assigns the id)."""
        return self.model_dump(mode="json", exclude={"id"})
