"""
Farkle - Turn Controller

Implements the state machine for a single player's turn.

Turn Flow:
    AWAITING_ROLL --roll--> AWAITING_SELECTION (scoring) | BUSTED (Farkle)
    AWAITING_SELECTION --hold scoring die--> AWAITING_ROLL
    AWAITING_ROLL --release all scoring dice--> AWAITING_SELECTION
    AWAITING_ROLL / AWAITING_SELECTION --bank--> BANKED | BUSTED (below minimum)

Illegal actions never raise: the same state object is returned unchanged.
"""

from dataclasses import replace
from typing import Sequence
import logging

from src.engine.base import DiceRoll, TurnPhase, TurnState
from src.engine.segment import SegmentResolver
from src.engine.validators import is_valid_die_index

logger = logging.getLogger(__name__)

_LIVE_PHASES = (TurnPhase.AWAITING_ROLL, TurnPhase.AWAITING_SELECTION)


class TurnController:
    """
    Stateless turn state machine.

    All methods are class methods taking a TurnState and returning a new one.
    """

    @classmethod
    def start_turn(cls) -> TurnState:
        """Fresh turn: all dice available, nothing scored."""
        return TurnState()

    @classmethod
    def can_roll(cls, state: TurnState) -> bool:
        if state.phase is not TurnPhase.AWAITING_ROLL:
            return False
        return state.can_roll_hot_dice or bool(state.dice.available_indices)

    @classmethod
    def can_bank(cls, state: TurnState) -> bool:
        return state.phase in _LIVE_PHASES and state.turn_total > 0

    @classmethod
    def roll(
        cls,
        state: TurnState,
        roll: DiceRoll | Sequence[int] | None = None
    ) -> TurnState:
        """
        Roll the next segment.

        Args:
            state: Current turn state
            roll: Optional pre-determined values for the thrown dice

        Returns:
            New turn state (same object if the roll is not allowed)
        """
        if not cls.can_roll(state):
            logger.debug("Roll rejected in phase %s", state.phase.name)
            return state

        segment = SegmentResolver.resolve(
            state.dice, hot_dice=state.can_roll_hot_dice, roll=roll
        )

        if segment.is_bust:
            logger.info("Farkle on %s, turn total of %d lost", segment.roll.values, state.turn_total)
            return replace(
                state,
                dice=segment.dice,
                phase=TurnPhase.BUSTED,
                turn_total=0,
                current_roll_score=0,
                current_roll_indices=segment.rolled_indices,
                holdable_indices=frozenset(),
                can_roll_hot_dice=False,
                roll_count=state.roll_count + 1,
            )

        if segment.is_hot_dice_roll:
            scored = frozenset()
        else:
            scored = state.scored_indices | SegmentResolver.scored_slots(
                state.dice, state.current_roll_indices
            )

        return replace(
            state,
            dice=segment.dice,
            phase=TurnPhase.AWAITING_SELECTION,
            segment_start_score=state.turn_total,
            current_roll_score=segment.scoring.points,
            current_roll_indices=segment.rolled_indices,
            holdable_indices=segment.holdable_indices,
            scored_indices=scored,
            can_roll_hot_dice=False,
            roll_count=state.roll_count + 1,
        )

    @classmethod
    def toggle_hold(cls, state: TurnState, index: int) -> TurnState:
        """
        Hold or release one die of the current segment.

        Args:
            state: Current turn state
            index: Board slot to toggle

        Returns:
            New turn state (same object if the toggle is not allowed)
        """
        if state.phase not in _LIVE_PHASES:
            logger.debug("Toggle rejected in phase %s", state.phase.name)
            return state
        if not is_valid_die_index(index):
            logger.debug("Toggle rejected for invalid slot %r", index)
            return state
        if index not in state.current_roll_indices or index not in state.holdable_indices:
            logger.debug("Slot %d is not holdable in this segment", index)
            return state

        releasing = state.dice[index].is_held
        if releasing and state.must_select_die:
            logger.debug("Release of slot %d rejected while a selection is required", index)
            return state

        dice = state.dice.release(index) if releasing else state.dice.hold(index)
        held_score = SegmentResolver.score_held(dice, state.current_roll_indices)
        segment_held = {i for i in state.current_roll_indices if dice[i].is_held}
        earlier_held = set(dice.held_indices) - segment_held

        phase = TurnPhase.AWAITING_ROLL if held_score.points > 0 else TurnPhase.AWAITING_SELECTION
        hot_dice = (
            phase is TurnPhase.AWAITING_ROLL
            and dice.all_held
            and SegmentResolver.scored_slots(dice, state.current_roll_indices) == segment_held
            and earlier_held <= state.scored_indices
        )

        return replace(
            state,
            dice=dice,
            phase=phase,
            turn_total=state.segment_start_score + held_score.points,
            current_roll_score=held_score.points,
            can_roll_hot_dice=hot_dice,
        )

    @classmethod
    def bank(
        cls,
        state: TurnState,
        *,
        is_on_board: bool,
        minimum_to_board: int
    ) -> TurnState:
        """
        Bank the turn total.

        A player who is not yet on the board must bank at least
        ``minimum_to_board`` in one turn; anything less is discarded and the
        turn ends as a bust.

        Args:
            state: Current turn state
            is_on_board: Whether the player has already qualified
            minimum_to_board: Qualifying amount for the first bank

        Returns:
            New turn state (same object if banking is not allowed)
        """
        if not cls.can_bank(state):
            logger.debug("Bank rejected in phase %s with total %d", state.phase.name, state.turn_total)
            return state

        if not is_on_board and state.turn_total < minimum_to_board:
            logger.info(
                "Bank of %d is below the %d minimum, turn scores nothing",
                state.turn_total, minimum_to_board,
            )
            return replace(
                state,
                phase=TurnPhase.BUSTED,
                turn_total=0,
                can_roll_hot_dice=False,
                missed_minimum=True,
            )

        return replace(state, phase=TurnPhase.BANKED, can_roll_hot_dice=False)
