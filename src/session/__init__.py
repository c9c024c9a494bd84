"""
Farkle Session Layer.

Owns the live game for a table and publishes events to the presentation layer.
"""

from src.session.events import EventPayload, GameEvent, classify_transition
from src.session.session import FarkleSession

__all__ = [
    "EventPayload",
    "FarkleSession",
    "GameEvent",
    "classify_transition",
]
