"""
Farkle - Scoring Engine

This module implements the scoring rules for a set of six-sided dice. All
methods are stateless class methods that operate on immutable inputs.

Scoring Rules (exactly six dice, checked first and exclusive):
    - 1-2-3-4-5-6 (Straight): 1,500 points
    - Three pairs: 1,500 points
    - Two triplets: 2,500 points

Scoring Rules (otherwise, one combination per face):
    - Six of a kind: 3,000 points
    - Five of a kind: 2,000 points
    - Four of a kind: 1,000 points
    - Three 1s: 1,000 points
    - Three of X (2-6): X × 100 points
    - Remaining single 1: 100 points
    - Remaining single 5: 50 points
"""

from collections import Counter
from typing import Sequence
import random

from src.engine.base import (
    NUM_DICE,
    DiceRoll,
    ScoringBreakdown,
    ScoringCategory,
    ScoringResult,
)
from src.engine.validators import validate_dice_values

_KIND_CATEGORIES = {
    6: ScoringCategory.SIX_OF_A_KIND,
    5: ScoringCategory.FIVE_OF_A_KIND,
    4: ScoringCategory.FOUR_OF_A_KIND,
    3: ScoringCategory.THREE_OF_A_KIND,
}

_KIND_NAMES = {6: "Six", 5: "Five", 4: "Four", 3: "Three"}


class FarkleScoringEngine:
    """
    Stateless scoring engine for Farkle.

    All methods are class methods operating on immutable data.
    """

    # Constants
    NUM_DICE = NUM_DICE

    # Scoring values
    SINGLE_ONE_POINTS = 100
    SINGLE_FIVE_POINTS = 50
    THREE_ONES_POINTS = 1000
    FOUR_OF_A_KIND_POINTS = 1000
    FIVE_OF_A_KIND_POINTS = 2000
    SIX_OF_A_KIND_POINTS = 3000
    STRAIGHT_POINTS = 1500
    THREE_PAIRS_POINTS = 1500
    TWO_TRIPLETS_POINTS = 2500

    @classmethod
    def roll_dice(cls, count: int = NUM_DICE) -> DiceRoll:
        """
        Roll the specified number of dice.

        Args:
            count: Number of dice to roll (default: 6)

        Returns:
            DiceRoll with random values
        """
        if not (1 <= count <= cls.NUM_DICE):
            raise ValueError(f"Can roll between 1 and {cls.NUM_DICE} dice, got {count}.")
        values = tuple(random.randint(1, 6) for _ in range(count))
        return DiceRoll(values=values)

    @classmethod
    def calculate_score(
        cls,
        dice: Sequence[int] | DiceRoll
    ) -> ScoringResult:
        """
        Calculate the score for a set of dice.

        The six-dice specials are checked first; when one matches it is the
        whole result. Otherwise each face yields at most one n-of-a-kind
        (largest first), then leftover 1s and 5s score as singles. Ties are
        settled by this fixed precedence, never by trying alternative
        decompositions.

        Args:
            dice: Dice values to score (sequence or DiceRoll)

        Returns:
            ScoringResult with total points, breakdown, and scoring indices
        """
        if isinstance(dice, DiceRoll):
            values = dice.values
        else:
            values = validate_dice_values(dice, min_count=0)

        if not values:
            return ScoringResult(
                points=0,
                breakdown=tuple(),
                scoring_dice_indices=frozenset(),
                is_bust=True
            )

        special = cls._check_six_dice_specials(values)
        if special is not None:
            return ScoringResult(
                points=special.points,
                breakdown=(special,),
                scoring_dice_indices=frozenset(range(len(values))),
                is_bust=False
            )

        sets_breakdown, sets_indices, remaining = cls._check_sets(values, Counter(values))
        singles_breakdown, singles_indices = cls._check_singles(values, remaining, sets_indices)

        breakdown = sets_breakdown + singles_breakdown
        total_points = sum(item.points for item in breakdown)

        return ScoringResult(
            points=total_points,
            breakdown=tuple(breakdown),
            scoring_dice_indices=frozenset(sets_indices | singles_indices),
            is_bust=total_points == 0
        )

    @classmethod
    def score(cls, dice: Sequence[int] | DiceRoll) -> tuple[int, bool]:
        """Return ``(points, has_scoring_option)`` for the dice."""
        result = cls.calculate_score(dice)
        return result.points, result.has_scoring_option

    @classmethod
    def scoring_indices(cls, dice: Sequence[int] | DiceRoll) -> frozenset[int]:
        """Positions of the dice that take part in a scoring combination."""
        return cls.calculate_score(dice).scoring_dice_indices

    @classmethod
    def three_of_a_kind_points(cls, face_value: int) -> int:
        if face_value == 1:
            return cls.THREE_ONES_POINTS
        return face_value * 100

    @classmethod
    def _check_six_dice_specials(
        cls,
        values: tuple[int, ...]
    ) -> ScoringBreakdown | None:
        """
        Check the combinations that need exactly six dice.

        Returns:
            The matching breakdown, or None
        """
        if len(values) != cls.NUM_DICE:
            return None

        counts = Counter(values)

        if sorted(values) == [1, 2, 3, 4, 5, 6]:
            return ScoringBreakdown(
                category=ScoringCategory.STRAIGHT,
                dice_values=(1, 2, 3, 4, 5, 6),
                points=cls.STRAIGHT_POINTS,
                description="Straight (1-2-3-4-5-6)"
            )

        if len(counts) == 3 and all(count == 2 for count in counts.values()):
            return ScoringBreakdown(
                category=ScoringCategory.THREE_PAIRS,
                dice_values=tuple(sorted(values)),
                points=cls.THREE_PAIRS_POINTS,
                description="Three Pairs"
            )

        # Two distinct faces only; six of one face stays six of a kind
        if len(counts) == 2 and all(count == 3 for count in counts.values()):
            low, high = sorted(counts)
            return ScoringBreakdown(
                category=ScoringCategory.TWO_TRIPLETS,
                dice_values=tuple(sorted(values)),
                points=cls.TWO_TRIPLETS_POINTS,
                description=f"Two Triplets ({low}s and {high}s)"
            )

        return None

    @classmethod
    def _check_sets(
        cls,
        values: tuple[int, ...],
        remaining: Counter[int]
    ) -> tuple[list[ScoringBreakdown], set[int], Counter[int]]:
        """
        Check for three or more of a kind, highest face first.

        Returns:
            Tuple of (breakdown, indices, counts left for the singles pass)
        """
        breakdown: list[ScoringBreakdown] = []
        indices: set[int] = set()

        for face_value in range(6, 0, -1):
            count = remaining[face_value]
            if count < 3:
                continue

            used = min(count, 6)
            if used == 6:
                points = cls.SIX_OF_A_KIND_POINTS
            elif used == 5:
                points = cls.FIVE_OF_A_KIND_POINTS
            elif used == 4:
                points = cls.FOUR_OF_A_KIND_POINTS
            else:
                points = cls.three_of_a_kind_points(face_value)

            indices.update(cls._find_indices_for_value(values, face_value, used, exclude=indices))
            remaining = remaining - Counter({face_value: used})

            breakdown.append(ScoringBreakdown(
                category=_KIND_CATEGORIES[used],
                dice_values=tuple([face_value] * used),
                points=points,
                description=f"{_KIND_NAMES[used]} {face_value}s"
            ))

        return breakdown, indices, remaining

    @classmethod
    def _check_singles(
        cls,
        values: tuple[int, ...],
        remaining: Counter[int],
        used_indices: set[int]
    ) -> tuple[list[ScoringBreakdown], set[int]]:
        """
        Check for remaining single 1s and 5s.

        Only 1s and 5s score as singles.
        """
        breakdown: list[ScoringBreakdown] = []
        indices: set[int] = set()

        for face_value, points_each, category in (
            (1, cls.SINGLE_ONE_POINTS, ScoringCategory.SINGLE_ONE),
            (5, cls.SINGLE_FIVE_POINTS, ScoringCategory.SINGLE_FIVE),
        ):
            count = remaining[face_value]
            if count <= 0:
                continue
            indices.update(cls._find_indices_for_value(
                values, face_value, count, exclude=used_indices | indices
            ))
            breakdown.append(ScoringBreakdown(
                category=category,
                dice_values=tuple([face_value] * count),
                points=count * points_each,
                description=f"{count}x Single {face_value}{'s' if count > 1 else ''}"
            ))

        return breakdown, indices

    @classmethod
    def _find_indices_for_value(
        cls,
        values: tuple[int, ...],
        target: int,
        count: int,
        exclude: set[int] | None = None
    ) -> set[int]:
        """Find `count` indices with the target value."""
        indices: set[int] = set()
        exclude = exclude or set()
        found = 0

        for i, v in enumerate(values):
            if v == target and i not in exclude and found < count:
                indices.add(i)
                found += 1

        return indices

    @classmethod
    def is_bust(cls, dice: Sequence[int] | DiceRoll) -> bool:
        """
        Check if a roll is a bust (no scoring dice).

        Args:
            dice: Dice values to check

        Returns:
            True if the roll contains no scoring combinations
        """
        return cls.calculate_score(dice).is_bust

    @classmethod
    def is_hot_dice(cls, dice: Sequence[int] | DiceRoll) -> bool:
        """
        Check if every die contributes to the score.

        Args:
            dice: Dice values to check

        Returns:
            True if all dice scored
        """
        values = dice.values if isinstance(dice, DiceRoll) else tuple(dice)
        if not values:
            return False

        result = cls.calculate_score(values)
        return len(result.scoring_dice_indices) == len(values)
