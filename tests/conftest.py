"""
Farkle - Test Configuration and Fixtures

Common fixtures and test data for all test modules.
"""

from typing import Callable, Sequence

import pytest

from src.engine.base import GameConfig, GameState, TurnPhase
from src.engine.game import GameController

BUST_ROLL = (2, 3, 4, 6, 2, 3)


# =============================================================================
# SCORING TEST DATA
# =============================================================================

@pytest.fixture
def farkle_scoring_rolls() -> dict[str, tuple[tuple[int, ...], int, str]]:
    """
    Common roll patterns with expected scores.

    Returns:
        Dict mapping name to (dice_values, expected_points, description)
    """
    return {
        # Singles
        "single_one": ((1,), 100, "Single 1"),
        "single_five": ((5,), 50, "Single 5"),
        "two_ones": ((1, 1), 200, "Two 1s"),
        "one_and_five": ((1, 5), 150, "One 1 and one 5"),

        # N of a kind
        "three_ones": ((1, 1, 1), 1000, "Three 1s"),
        "three_twos": ((2, 2, 2), 200, "Three 2s"),
        "three_sixes": ((6, 6, 6), 600, "Three 6s"),
        "four_twos": ((2, 2, 2, 2), 1000, "Four 2s"),
        "four_ones": ((1, 1, 1, 1), 1000, "Four 1s"),
        "five_fives": ((5, 5, 5, 5, 5), 2000, "Five 5s"),
        "six_sixes": ((6, 6, 6, 6, 6, 6), 3000, "Six 6s"),
        "six_ones": ((1, 1, 1, 1, 1, 1), 3000, "Six 1s, never two triplets"),

        # Six-dice specials
        "straight": ((1, 2, 3, 4, 5, 6), 1500, "Straight"),
        "straight_shuffled": ((6, 4, 2, 5, 3, 1), 1500, "Straight shuffled"),
        "three_pairs": ((2, 2, 3, 3, 5, 5), 1500, "Three pairs"),
        "three_pairs_with_ones": ((1, 1, 2, 2, 3, 3), 1500, "Three pairs including 1s"),
        "two_triplets": ((4, 4, 4, 6, 6, 6), 2500, "Two triplets"),
        "two_triplets_ones_fives": ((1, 1, 1, 5, 5, 5), 2500, "Two triplets of 1s and 5s"),

        # Mixed combinations
        "two_ones_with_junk": ((1, 1, 2, 3, 4), 200, "Two single 1s"),
        "three_threes_with_pair": ((2, 2, 3, 3, 3), 300, "Three 3s, 2s unscored"),
        "three_ones_plus_five": ((1, 1, 1, 5), 1050, "Three 1s + single 5"),
        "three_fours_plus_one": ((4, 4, 4, 1), 500, "Three 4s + single 1"),
        "four_ones_two_fives": ((1, 1, 1, 1, 5, 5), 1100, "Four 1s + two 5s, not three pairs"),
        "four_twos_pair": ((2, 2, 2, 2, 3, 3), 1000, "Four 2s, 3s unscored"),
        "five_threes_one": ((3, 3, 3, 3, 3, 1), 2100, "Five 3s + single 1"),
        "five_dice_run": ((1, 2, 3, 4, 5), 150, "No short straights"),
    }


@pytest.fixture
def farkle_bust_rolls() -> list[tuple[int, ...]]:
    """Rolls that should result in a bust."""
    return [
        (2,),
        (3, 4),
        (2, 3, 4, 6),
        (2, 2, 3, 3, 4),
        (2, 2, 3, 3, 4, 6),
        (2, 2, 4, 4, 6, 3),
        BUST_ROLL,
    ]


@pytest.fixture
def farkle_hot_dice_rolls() -> list[tuple[int, ...]]:
    """Rolls where every die scores."""
    return [
        (1, 2, 3, 4, 5, 6),
        (1, 1, 1, 5, 5, 5),
        (1, 1, 1, 1, 5, 5),
        (3, 3, 4, 4, 6, 6),
        (1, 5),
    ]


# =============================================================================
# DICE ROLLERS
# =============================================================================

@pytest.fixture
def scripted_roller() -> Callable[..., Callable[[int], tuple[int, ...]]]:
    """
    Factory for rollers that hand out pre-determined dice.

    Each call to the roller pops the next scripted roll and checks that it
    matches the number of dice requested. The requested counts are kept on
    the roller's ``calls`` attribute.
    """
    def make(*rolls: Sequence[int]) -> Callable[[int], tuple[int, ...]]:
        queue = [tuple(roll) for roll in rolls]
        calls: list[int] = []

        def roller(count: int) -> tuple[int, ...]:
            calls.append(count)
            if not queue:
                raise AssertionError(f"No scripted roll left for {count} dice")
            values = queue.pop(0)
            if len(values) != count:
                raise AssertionError(f"Scripted roll {values} does not match {count} dice")
            return values

        roller.calls = calls  # type: ignore[attr-defined]
        roller.remaining = queue  # type: ignore[attr-defined]
        return roller

    return make


# =============================================================================
# GAME STATE FIXTURES
# =============================================================================

@pytest.fixture
def two_player_game() -> GameState:
    """Fresh game for Alice and Bob with default rules."""
    return GameController.new_game(["Alice", "Bob"])


@pytest.fixture
def quick_config() -> GameConfig:
    """Rules with a low winning score so final rounds are short to script."""
    return GameConfig(min_score_to_board=500, winning_score=1000)


@pytest.fixture
def play_turn() -> Callable[..., GameState]:
    """
    Play the current player's turn from scripted segments.

    After each roll every holdable die is held. The turn is banked at the
    end unless it already ended (bust) or ``bank=False``.
    """
    def play(state: GameState, *segments: Sequence[int], bank: bool = True) -> GameState:
        for values in segments:
            state = GameController.roll(state, values)
            if state.turn.phase is not TurnPhase.AWAITING_SELECTION:
                return state
            for index in sorted(state.turn.holdable_indices):
                state = GameController.toggle_hold(state, index)
        if bank:
            state = GameController.bank(state)
        return state

    return play


@pytest.fixture
def bust_turn() -> Callable[[GameState], GameState]:
    """End the current player's turn with a six-dice Farkle."""
    def bust(state: GameState) -> GameState:
        return GameController.roll(state, BUST_ROLL)

    return bust
