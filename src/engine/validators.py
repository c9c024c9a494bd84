"""
Farkle - Input Validation Utilities

Provides validation functions for game engine inputs. All validators
either return validated data or raise descriptive ValueError exceptions.
"""

from typing import Sequence

from src.engine.base import DIE_FACES, NUM_DICE


class GameSetupError(ValueError):
    """The game cannot start with the given configuration."""


def validate_dice_values(
    values: Sequence[int],
    min_count: int = 1,
    max_count: int | None = NUM_DICE
) -> tuple[int, ...]:
    """
    Validate and normalize dice values.

    Args:
        values: Sequence of dice values to validate
        min_count: Minimum number of dice required
        max_count: Maximum number of dice allowed (None = no limit)

    Returns:
        Validated values as a tuple

    Raises:
        ValueError: If validation fails
    """
    if not values:
        if min_count > 0:
            raise ValueError(f"At least {min_count} dice required.")
        return tuple()

    values_tuple = tuple(values)
    count = len(values_tuple)

    if count < min_count:
        raise ValueError(f"At least {min_count} dice required, got {count}.")

    if max_count is not None and count > max_count:
        raise ValueError(f"At most {max_count} dice allowed, got {count}.")

    for i, value in enumerate(values_tuple):
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"Die value at index {i} must be an integer, got {type(value).__name__}.")
        if not (1 <= value <= DIE_FACES):
            raise ValueError(
                f"Die value at index {i} is {value}, must be between 1 and {DIE_FACES}."
            )

    return values_tuple


def is_valid_die_index(index: object) -> bool:
    """Whether *index* addresses one of the six dice slots."""
    return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < NUM_DICE


def validate_player_names(names: Sequence[str]) -> tuple[str, ...]:
    """
    Validate the seating for a new game.

    Args:
        names: Ordered display names

    Returns:
        Stripped names as a tuple

    Raises:
        GameSetupError: If the list is empty, contains blanks or duplicates
    """
    if isinstance(names, str):
        raise GameSetupError("Player names must be a sequence of names, not a single string.")
    if not names:
        raise GameSetupError("At least one player is required.")

    cleaned: list[str] = []
    for i, name in enumerate(names):
        if not isinstance(name, str):
            raise GameSetupError(f"Player name at index {i} must be a string, got {type(name).__name__}.")
        stripped = name.strip()
        if not stripped:
            raise GameSetupError(f"Player name at index {i} is blank.")
        if stripped in cleaned:
            raise GameSetupError(f"Duplicate player name {stripped!r}.")
        cleaned.append(stripped)

    return tuple(cleaned)
