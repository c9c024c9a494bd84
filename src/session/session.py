"""
Farkle - Game Session

Holds the single GameState for a table and is the only place it changes.
The presentation layer sends actions here and receives an EventPayload for
every transition that changed something. Rejected actions are silent.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from src.config.settings import get_settings
from src.database.models import GameResult
from src.engine.ai import ComputerPlayer, Roller
from src.engine.base import ActionType, GameConfig, GamePhase, GameState, PlayerAction
from src.engine.game import GameController
from src.engine.segment import SegmentResolver
from src.engine.turn import TurnController
from src.session.events import EventPayload, GameEvent, classify_transition, describe_transition

logger = logging.getLogger(__name__)

Listener = Callable[[EventPayload], None]
HistorySink = Callable[[GameResult], object]

_RESET_ACTIONS = (ActionType.RESET_SAME_SEATING, ActionType.RESET_NEW_SEATING)


class FarkleSession:
    """Owns one game and notifies listeners about its changes.

    Args:
        player_names: Ordered, unique display names.
        config: Rule constants.
        history_sink: Called once with the GameResult when a game ends.
        roller: Optional source of dice values, ``roller(count)``; random
            dice are used when omitted.
        roll_display_delay: Seconds a UI should show a fresh roll before
            acting on it; ``roll_display_delay_seconds`` from settings when
            omitted.
    """

    def __init__(
        self,
        player_names: Sequence[str],
        config: GameConfig | None = None,
        *,
        history_sink: HistorySink | None = None,
        roller: Roller | None = None,
        roll_display_delay: float | None = None,
    ) -> None:
        self._state = GameController.new_game(player_names, config)
        self._listeners: list[Listener] = []
        self._history_sink = history_sink
        self._roller = roller
        self._result_recorded = False
        if roll_display_delay is None:
            roll_display_delay = get_settings().roll_display_delay_seconds
        self._roll_display_delay = roll_display_delay

    @property
    def snapshot(self) -> GameState:
        """Current read-only game state."""
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ── Actions ─────────────────────────────────────────────────────────

    def roll(self) -> GameState:
        return self.dispatch(PlayerAction.roll())

    def toggle_hold(self, die_index: int) -> GameState:
        return self.dispatch(PlayerAction.toggle_hold(die_index))

    def bank(self) -> GameState:
        return self.dispatch(PlayerAction.bank())

    def reset_same_seating(self) -> GameState:
        return self.dispatch(PlayerAction.reset_same_seating())

    def reset_new_seating(self, player_names: Sequence[str]) -> GameState:
        return self.dispatch(PlayerAction.reset_new_seating(player_names))

    def dispatch(self, action: PlayerAction) -> GameState:
        """Apply one action and notify listeners if the state changed.

        Raises:
            GameSetupError: If a new seating is invalid (the current game is kept)
        """
        before = self._state
        roll = self._next_roll(before) if action.kind is ActionType.ROLL else None
        after = GameController.apply(before, action, roll)
        if after is before:
            return before

        self._state = after
        if action.kind in _RESET_ACTIONS:
            self._result_recorded = False
            self._emit(EventPayload(event=GameEvent.GAME_STARTED, state=after,
                                    data={"players": list(after.player_names)}))
            return after

        self._publish(before, after)
        return after

    def play_computer_turn(self, player: ComputerPlayer | None = None) -> GameState:
        """Let the computer play the current seat's whole turn."""
        player = player or ComputerPlayer()
        return player.take_turn(self._state, perform=self.dispatch)

    # ── Internals ───────────────────────────────────────────────────────

    def _next_roll(self, state: GameState) -> Sequence[int] | None:
        if self._roller is None or state.is_over or not TurnController.can_roll(state.turn):
            return None
        turn = state.turn
        count = len(SegmentResolver.indices_to_roll(turn.dice, hot_dice=turn.can_roll_hot_dice))
        if count == 0:
            return None
        return self._roller(count)

    def _publish(self, before: GameState, after: GameState) -> None:
        event = classify_transition(before, after)
        if event is None:
            return
        data = describe_transition(event, before, after)
        if event is GameEvent.DICE_ROLLED:
            data["display_delay_seconds"] = self._roll_display_delay
        self._emit(EventPayload(
            event=event,
            state=after,
            player_index=before.current_player_index,
            data=data,
        ))
        if after.phase is GamePhase.OVER:
            self._record_result(after)

    def _emit(self, payload: EventPayload) -> None:
        for listener in list(self._listeners):
            try:
                listener(payload)
            except Exception:
                logger.exception("Listener failed for %s", payload.event.name)

    def _record_result(self, state: GameState) -> None:
        if self._result_recorded or self._history_sink is None:
            return
        self._result_recorded = True
        try:
            self._history_sink(GameResult.from_game_state(state))
        except Exception:
            logger.exception("Failed to record game history")
