"""
Farkle - Session Event Definitions

Event types and payloads delivered to the presentation layer after each
state-changing action.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from src.engine.base import GamePhase, GameState


class GameEvent(Enum):
    """Events that can occur during a game."""

    GAME_STARTED = auto()
    DICE_ROLLED = auto()
    DICE_HELD = auto()
    DICE_RELEASED = auto()
    HOT_DICE = auto()
    TURN_BANKED = auto()
    PLAYER_BUST = auto()
    MINIMUM_NOT_MET = auto()
    FINAL_ROUND_STARTED = auto()
    TIE_BREAKER_STARTED = auto()
    GAME_WON = auto()
    GAME_ERROR = auto()
    STATE_UPDATED = auto()


@dataclass
class EventPayload:
    """Wrapper for a session event and the snapshot it produced."""

    event: GameEvent
    state: GameState
    player_index: int | None = None
    data: dict[str, Any] = field(default_factory=dict)


def classify_transition(before: GameState, after: GameState) -> GameEvent | None:
    """
    Determine the game event from a pair of snapshots.

    Game-level changes win over turn-level ones: a bank that starts the final
    round is reported as FINAL_ROUND_STARTED.

    Returns:
        The event, or None when nothing changed
    """
    if after is before:
        return None

    if after.phase is GamePhase.ERROR and before.phase is not GamePhase.ERROR:
        return GameEvent.GAME_ERROR
    if after.phase is GamePhase.OVER and before.phase is not GamePhase.OVER:
        return GameEvent.GAME_WON
    if after.phase is GamePhase.TIE_BREAKER and (
        before.phase is not GamePhase.TIE_BREAKER
        or after.tie_breaker_participants != before.tie_breaker_participants
    ):
        return GameEvent.TIE_BREAKER_STARTED
    if after.phase is GamePhase.FINAL_ROUND and before.phase is GamePhase.NORMAL:
        return GameEvent.FINAL_ROUND_STARTED

    if after.last_turn is not None and after.last_turn is not before.last_turn:
        if after.last_turn.is_banked:
            return GameEvent.TURN_BANKED
        if after.last_turn.missed_minimum:
            return GameEvent.MINIMUM_NOT_MET
        return GameEvent.PLAYER_BUST

    if after.turn.roll_count > before.turn.roll_count:
        return GameEvent.DICE_ROLLED
    if after.turn.can_roll_hot_dice and not before.turn.can_roll_hot_dice:
        return GameEvent.HOT_DICE

    held_before = len(before.turn.dice.held_indices)
    held_after = len(after.turn.dice.held_indices)
    if held_after > held_before:
        return GameEvent.DICE_HELD
    if held_after < held_before:
        return GameEvent.DICE_RELEASED

    return GameEvent.STATE_UPDATED


def describe_transition(event: GameEvent, before: GameState, after: GameState) -> dict[str, Any]:
    """Extra details the presentation layer shows alongside an event."""
    if event is GameEvent.DICE_ROLLED:
        turn = after.turn
        return {
            "rolled": [turn.dice[i].value for i in turn.current_roll_indices],
            "roll_score": turn.current_roll_score,
        }
    if event in (GameEvent.DICE_HELD, GameEvent.DICE_RELEASED, GameEvent.HOT_DICE):
        return {"turn_total": after.turn.turn_total}
    if event in (GameEvent.TURN_BANKED, GameEvent.PLAYER_BUST, GameEvent.MINIMUM_NOT_MET):
        player = after.players[before.current_player_index]
        return {"recorded": after.last_turn.recorded_score, "total": player.total}
    if event is GameEvent.FINAL_ROUND_STARTED:
        return {"triggered_by": after.players[after.final_round_triggered_by].name}
    if event is GameEvent.TIE_BREAKER_STARTED:
        return {"participants": [after.players[i].name for i in after.tie_breaker_participants]}
    if event is GameEvent.GAME_WON:
        return {"winner": after.winner_name, "totals": list(after.totals)}
    if event is GameEvent.GAME_ERROR:
        return {"reason": after.error_reason}
    return {}
