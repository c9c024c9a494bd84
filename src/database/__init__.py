"""
Farkle Database Layer.

Supabase integration for finished-game history.
"""

from src.database.client import get_supabase_client
from src.database.history import GameHistoryManager
from src.database.models import GameResult

__all__ = [
    "get_supabase_client",
    "GameHistoryManager",
    "GameResult",
]
