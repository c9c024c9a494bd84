"""
Farkle - Roll Segment Resolver

A roll segment is the set of dice thrown by a single roll action. This module
rolls the right slots (the available ones, or all six after hot dice), scores
only the newly rolled values, and works out which slots may be held.
"""

from dataclasses import dataclass
from typing import Sequence

from src.engine.base import DiceRoll, DiceSet, ScoringResult
from src.engine.scoring import FarkleScoringEngine


@dataclass(frozen=True)
class SegmentResult:
    """
    Outcome of rolling one segment.

    Attributes:
        dice: Board after the roll (held dice untouched)
        rolled_indices: Slots that were thrown, in ascending order
        roll: Values thrown, aligned with rolled_indices
        scoring: Score of the thrown values only
        holdable_indices: Board slots the player may hold from this segment
        is_hot_dice_roll: All six dice were released and thrown fresh
    """
    dice: DiceSet
    rolled_indices: tuple[int, ...]
    roll: DiceRoll
    scoring: ScoringResult
    holdable_indices: frozenset[int]
    is_hot_dice_roll: bool = False

    @property
    def is_bust(self) -> bool:
        return self.scoring.is_bust


class SegmentResolver:
    """Stateless resolver for a single roll action."""

    @classmethod
    def indices_to_roll(cls, dice: DiceSet, *, hot_dice: bool = False) -> tuple[int, ...]:
        """Slots the next roll would throw."""
        if hot_dice:
            return tuple(range(len(dice)))
        return dice.available_indices

    @classmethod
    def resolve(
        cls,
        dice: DiceSet,
        *,
        hot_dice: bool = False,
        roll: DiceRoll | Sequence[int] | None = None
    ) -> SegmentResult:
        """
        Roll a segment and score it.

        Args:
            dice: Current board
            hot_dice: Release every die and throw all six
            roll: Optional pre-determined values for the thrown slots

        Returns:
            SegmentResult for the new segment

        Raises:
            ValueError: If there is nothing to roll, or a provided roll does
                not match the number of thrown dice
        """
        if hot_dice:
            dice = dice.release_all()

        indices = cls.indices_to_roll(dice)
        if not indices:
            raise ValueError("No available dice to roll.")

        if roll is None:
            roll = FarkleScoringEngine.roll_dice(len(indices))
        elif not isinstance(roll, DiceRoll):
            roll = DiceRoll.from_sequence(roll)

        if len(roll) != len(indices):
            raise ValueError(f"Expected {len(indices)} dice values, got {len(roll)}.")

        new_dice = dice.with_values(indices, roll.values)
        scoring = FarkleScoringEngine.calculate_score(roll)

        # Scoring positions are relative to the roll; map them onto board slots
        holdable = frozenset(indices[pos] for pos in scoring.scoring_dice_indices)

        return SegmentResult(
            dice=new_dice,
            rolled_indices=indices,
            roll=roll,
            scoring=scoring,
            holdable_indices=holdable,
            is_hot_dice_roll=hot_dice,
        )

    @classmethod
    def score_held(cls, dice: DiceSet, segment_indices: Sequence[int]) -> ScoringResult:
        """
        Score the held dice of the current segment.

        Args:
            dice: Current board
            segment_indices: Slots rolled by the current segment

        Returns:
            ScoringResult over the held subset (empty subset scores 0)
        """
        values = [dice[i].value for i in segment_indices if dice[i].is_held]
        return FarkleScoringEngine.calculate_score(values)

    @classmethod
    def scored_slots(cls, dice: DiceSet, segment_indices: Sequence[int]) -> frozenset[int]:
        """Board slots of the current segment whose held dice count toward the score."""
        held = [i for i in segment_indices if dice[i].is_held]
        result = FarkleScoringEngine.calculate_score([dice[i].value for i in held])
        return frozenset(held[j] for j in result.scoring_dice_indices)
