"""
Farkle - Computer Opponent

FarkleAI offers two decisions: which dice to keep from a roll, and whether to
roll again or bank. ComputerPlayer uses them to play a full turn through the
ordinary GameController actions.

The dice selection is a greedy heuristic: it repeatedly takes the best single
option (highest score, then most dice) from what is left. It does not search
for the best overall combination and can leave points on the table; that is
the intended playing style.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Callable, Sequence
import logging

from src.engine.base import ActionType, GameState, PlayerAction, ScoringOption, TurnState
from src.engine.game import GameController
from src.engine.segment import SegmentResolver
from src.engine.turn import TurnController

logger = logging.getLogger(__name__)

Roller = Callable[[int], Sequence[int]]
ActionCallback = Callable[[PlayerAction], GameState]


@dataclass(frozen=True)
class KeptDiceDecision:
    """
    The dice the computer keeps from a roll.

    Attributes:
        kept_dice: Face values kept, sorted
        remaining_dice: Face values left to re-roll, sorted
        score: Points for the kept dice as the AI counts them
        description: Summary such as "Three 1s, Single 5"
    """
    kept_dice: tuple[int, ...]
    remaining_dice: tuple[int, ...]
    score: int
    description: str


class FarkleAI:
    """Roll-or-bank and keep-which-dice heuristics."""

    MIN_SCORE_TO_GET_ON_BOARD = 500
    SAFE_BANK_SCORE_HIGH = 1000
    SAFE_BANK_SCORE_MODERATE = 600
    AGGRESSIVE_ROLL_SCORE_LOW = 350

    DICE_COUNT_FEW = 2
    DICE_COUNT_MANY = 4

    SCORE_DIFF_FAR_BEHIND = -1500
    SCORE_DIFF_SLIGHTLY_BEHIND = -500
    SCORE_DIFF_SLIGHTLY_AHEAD = 500
    SCORE_DIFF_FAR_AHEAD = 1500

    def identify_scoring_options(self, dice: Sequence[int]) -> list[ScoringOption]:
        """
        List every rule-based scoring option in the dice.

        Options may overlap (a 1 counts both as a single and as part of three
        1s); pick_dice_to_keep decides between them.
        """
        options: list[ScoringOption] = []
        counts = Counter(dice)

        for value in dice:
            if value == 1:
                options.append(ScoringOption(100, "Single 1", (1,)))
            elif value == 5:
                options.append(ScoringOption(50, "Single 5", (5,)))

        for face in range(1, 7):
            if counts[face] >= 3:
                score = 1000 if face == 1 else face * 100
                options.append(ScoringOption(score, f"Three {face}s", (face,) * 3))

        for face in range(1, 7):
            count = counts[face]
            if count >= 6:
                options.append(ScoringOption(3000, f"Six {face}s", (face,) * 6))
            elif count == 5:
                options.append(ScoringOption(2000, f"Five {face}s", (face,) * 5))
            elif count == 4:
                options.append(ScoringOption(1000, f"Four {face}s", (face,) * 4))

        if all(counts[face] >= 1 for face in range(1, 7)):
            options.append(ScoringOption(1500, "Straight (1-2-3-4-5-6)", (1, 2, 3, 4, 5, 6)))

        # A face showing four times counts as two pairs
        pair_dice: list[int] = []
        for face in range(1, 7):
            pair_dice.extend([face] * (counts[face] // 2 * 2))
        if len(pair_dice) == 6:
            options.append(ScoringOption(1500, "Three Pairs", tuple(sorted(pair_dice))))

        triplet_faces = [face for face in range(1, 7) if counts[face] >= 3]
        for i, low in enumerate(triplet_faces):
            for high in triplet_faces[i + 1:]:
                options.append(ScoringOption(
                    2500,
                    f"Two Triplets ({low}s and {high}s)",
                    tuple(sorted((low,) * 3 + (high,) * 3)),
                ))

        return options

    def pick_dice_to_keep(self, roll: Sequence[int]) -> KeptDiceDecision | None:
        """
        Greedily choose the dice to keep from a roll.

        Args:
            roll: Face values just rolled

        Returns:
            The decision, or None if nothing in the roll scores
        """
        available = list(roll)
        kept: list[int] = []
        descriptions: list[str] = []
        total = 0

        while available:
            options = self.identify_scoring_options(available)
            if not options:
                break

            best = max(options, key=lambda option: (option.score, len(option.dice_used)))
            if best.score <= 0:
                break

            kept.extend(best.dice_used)
            total += best.score
            descriptions.append(best.description)
            available = self._remove_dice(available, best.dice_used)

        if not kept:
            return None

        return KeptDiceDecision(
            kept_dice=tuple(sorted(kept)),
            remaining_dice=tuple(sorted(available)),
            score=total,
            description=", ".join(descriptions),
        )

    @staticmethod
    def _remove_dice(pool: list[int], to_remove: Sequence[int]) -> list[int]:
        """Remove one die per value in to_remove, duplicates included."""
        remaining = list(pool)
        for value in to_remove:
            if value in remaining:
                remaining.remove(value)
        return remaining

    def should_roll_again(
        self,
        remaining_dice: int,
        turn_score: int,
        self_total: int,
        opponent_total: int
    ) -> bool:
        """
        Decide between rolling again and banking.

        Args:
            remaining_dice: Dice that the next roll would throw (0 = hot dice)
            turn_score: Points accumulated this turn
            self_total: Computer's banked total
            opponent_total: Best opposing total

        Returns:
            True to roll again, False to bank
        """
        if remaining_dice == 0:
            return True

        if self_total == 0:
            if turn_score < self.MIN_SCORE_TO_GET_ON_BOARD:
                return True
            # Qualified: bank unless plenty of dice remain and the score is modest
            return (
                remaining_dice >= self.DICE_COUNT_MANY - 1
                and turn_score < self.SAFE_BANK_SCORE_MODERATE
            )

        difference = self_total - opponent_total
        desire = 0

        if difference < self.SCORE_DIFF_FAR_BEHIND:
            desire += 3
        elif difference < self.SCORE_DIFF_SLIGHTLY_BEHIND:
            desire += 1
        elif difference > self.SCORE_DIFF_FAR_AHEAD:
            desire -= 3
        elif difference > self.SCORE_DIFF_SLIGHTLY_AHEAD:
            desire -= 1

        if turn_score < self.AGGRESSIVE_ROLL_SCORE_LOW:
            desire += 2
        elif turn_score >= self.SAFE_BANK_SCORE_HIGH:
            desire -= 3
        elif turn_score >= self.SAFE_BANK_SCORE_MODERATE:
            desire -= 1

        if remaining_dice >= self.DICE_COUNT_MANY:
            desire += 2
        elif remaining_dice <= self.DICE_COUNT_FEW:
            desire -= 2
            if remaining_dice == 1:
                desire -= 1

        return desire > 0


class ComputerPlayer:
    """Plays turns for a computer-controlled seat using FarkleAI."""

    def __init__(self, ai: FarkleAI | None = None):
        self.ai = ai or FarkleAI()

    def choose_holds(self, turn: TurnState) -> tuple[int, ...]:
        """
        Board slots to hold for the current segment.

        The AI reasons about face values; each kept value is matched to a
        holdable slot of the segment showing that value.
        """
        segment = turn.current_roll_indices
        if not segment:
            return tuple()

        decision = self.ai.pick_dice_to_keep([turn.dice[i].value for i in segment])
        if decision is None:
            return tuple()

        candidates = [i for i in segment if i in turn.holdable_indices]
        slots: list[int] = []
        for value in decision.kept_dice:
            for i in candidates:
                if i not in slots and turn.dice[i].value == value:
                    slots.append(i)
                    break

        return tuple(sorted(slots))

    def decide_roll_again(self, state: GameState) -> bool:
        turn = state.turn
        remaining = 0 if turn.can_roll_hot_dice else len(turn.dice.available_indices)
        others = [p.total for i, p in enumerate(state.players) if i != state.current_player_index]
        opponent_total = max(others) if others else 0

        return self.ai.should_roll_again(
            remaining,
            turn.turn_total,
            state.current_player.total,
            opponent_total,
        )

    def next_action(self, state: GameState) -> PlayerAction | None:
        """
        The next action the computer would take, or None if it has none.

        Holds are issued one slot at a time, then the roll-or-bank decision
        is made once every planned hold is in place.
        """
        turn = state.turn
        if state.is_over or turn.is_finished:
            return None

        if turn.roll_count == 0:
            return PlayerAction.roll()

        for slot in self.choose_holds(turn):
            if not turn.dice[slot].is_held:
                return PlayerAction.toggle_hold(slot)

        if turn.must_select_die:
            # The planned holds did not score on their own; take every scoring die
            for slot in sorted(turn.holdable_indices):
                if not turn.dice[slot].is_held:
                    return PlayerAction.toggle_hold(slot)
            return None

        if self.decide_roll_again(state) and TurnController.can_roll(turn):
            return PlayerAction.roll()
        return PlayerAction.bank()

    def take_turn(
        self,
        state: GameState,
        roller: Roller | None = None,
        *,
        perform: ActionCallback | None = None
    ) -> GameState:
        """
        Play the current player's turn to completion.

        Args:
            state: Game state with the computer to act
            roller: Optional callable returning face values for a given
                number of dice; random dice are used when omitted
            perform: Optional callable that carries out each action and
                returns the resulting state; when omitted the actions are
                applied through GameController with ``roller``

        Returns:
            Game state after the turn has been banked or busted
        """
        finished_turn = state.last_turn
        name = state.current_player.name

        while not state.is_over and state.last_turn is finished_turn:
            action = self.next_action(state)
            if action is None:
                logger.warning("Computer player %s has no legal action", name)
                break

            if perform is not None:
                new_state = perform(action)
            else:
                new_state = GameController.apply(state, action, self._roll_for(state, action, roller))
            if new_state is state:
                logger.warning("Computer player %s action %s was rejected", name, action.kind.value)
                break
            state = new_state

        return state

    @staticmethod
    def _roll_for(state: GameState, action: PlayerAction, roller: Roller | None) -> Sequence[int] | None:
        if action.kind is not ActionType.ROLL or roller is None:
            return None
        count = len(SegmentResolver.indices_to_roll(
            state.turn.dice, hot_dice=state.turn.can_roll_hot_dice
        ))
        return roller(count)
