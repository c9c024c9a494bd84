"""
Farkle - Game Engine Base Classes

This module defines the foundational data structures and enums used throughout
the game engine. All classes are immutable (frozen dataclasses); every
transition builds a new value instead of mutating the old one.
"""

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import ClassVar, Sequence

NUM_DICE = 6
DIE_FACES = 6


class DieState(Enum):
    """Whether a die can be rolled or has been set aside."""
    AVAILABLE = "available"
    HELD = "held"


class TurnPhase(Enum):
    """Explicit state of a single player's turn."""
    AWAITING_ROLL = auto()       # Turn start, or a scoring selection has been made
    AWAITING_SELECTION = auto()  # Scoring roll, player must hold a scoring die
    BUSTED = auto()              # Farkle or failed minimum bank (terminal)
    BANKED = auto()              # Turn total added to the player's score (terminal)


class GamePhase(Enum):
    """Explicit state of the whole game."""
    NORMAL = auto()
    FINAL_ROUND = auto()   # Someone crossed the winning score
    TIE_BREAKER = auto()   # Tied leaders play extra single turns
    OVER = auto()
    ERROR = auto()         # Internal invariant violated, game halted


class ActionType(Enum):
    """Actions the presentation layer can send to the engine."""
    ROLL = "roll"
    TOGGLE_HOLD = "toggle_hold"
    BANK = "bank"
    RESET_SAME_SEATING = "reset_same_seating"
    RESET_NEW_SEATING = "reset_new_seating"


class ScoringCategory(Enum):
    """Categories of scoring combinations."""
    SINGLE_ONE = auto()
    SINGLE_FIVE = auto()
    THREE_OF_A_KIND = auto()
    FOUR_OF_A_KIND = auto()
    FIVE_OF_A_KIND = auto()
    SIX_OF_A_KIND = auto()
    STRAIGHT = auto()          # 1-2-3-4-5-6
    THREE_PAIRS = auto()
    TWO_TRIPLETS = auto()


@dataclass(frozen=True)
class ScoringBreakdown:
    """
    A single scoring component within a roll.

    Attributes:
        category: The type of scoring combination
        dice_values: The dice that contributed to this score
        points: Points awarded for this combination
        description: Human-readable description
    """
    category: ScoringCategory
    dice_values: tuple[int, ...]
    points: int
    description: str


@dataclass(frozen=True)
class ScoringResult:
    """
    Complete scoring result for a set of dice.

    Attributes:
        points: Total points scored
        breakdown: List of individual scoring components
        scoring_dice_indices: Positions of dice that scored
        is_bust: Whether no dice scored (Farkle)
    """
    points: int
    breakdown: tuple[ScoringBreakdown, ...]
    scoring_dice_indices: frozenset[int]
    is_bust: bool = False

    @property
    def has_scoring_option(self) -> bool:
        """Returns True if any scoring combination was found."""
        return self.points > 0

    def __str__(self) -> str:
        if self.is_bust:
            return "FARKLE! No scoring dice."
        lines = [f"Total: {self.points} points"]
        for item in self.breakdown:
            lines.append(f"  - {item.description}: {item.points}")
        return "\n".join(lines)


@dataclass(frozen=True)
class ScoringOption:
    """
    One rule-based way of scoring some of the dice, as seen by the AI.

    Attributes:
        score: Points for this option
        description: Label such as "Three 1s" or "Single 5"
        dice_used: Face values consumed by this option
    """
    score: int
    description: str
    dice_used: tuple[int, ...]


@dataclass(frozen=True)
class DiceRoll:
    """
    Immutable representation of a dice roll.

    Attributes:
        values: Tuple of dice face values
    """
    values: tuple[int, ...]

    def __post_init__(self) -> None:
        """Validate dice values are within valid range."""
        for value in self.values:
            if not (1 <= value <= DIE_FACES):
                raise ValueError(
                    f"Invalid die value {value}. Must be between 1 and {DIE_FACES}."
                )

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, index: int) -> int:
        return self.values[index]

    @classmethod
    def from_sequence(cls, values: Sequence[int]) -> "DiceRoll":
        """Create a DiceRoll from any sequence type."""
        return cls(values=tuple(values))


@dataclass(frozen=True)
class Die:
    """
    One physical die on the board.

    The slot number is the die's identity; its value and state change
    from roll to roll, the slot never does.
    """
    slot: int
    value: int = 1
    state: DieState = DieState.AVAILABLE

    @property
    def is_held(self) -> bool:
        return self.state is DieState.HELD


@dataclass(frozen=True)
class DiceSet:
    """
    The six dice on the board, addressed by slot.

    Attributes:
        dice: Exactly six dice; ``dice[i].slot == i``
    """
    dice: tuple[Die, ...]

    def __post_init__(self) -> None:
        if len(self.dice) != NUM_DICE:
            raise ValueError(f"A dice set must have exactly {NUM_DICE} dice, got {len(self.dice)}.")
        for index, die in enumerate(self.dice):
            if die.slot != index:
                raise ValueError(f"Die in position {index} has slot {die.slot}.")

    @classmethod
    def initial(cls) -> "DiceSet":
        """All dice available, showing 1."""
        return cls(dice=tuple(Die(slot=i) for i in range(NUM_DICE)))

    def __len__(self) -> int:
        return len(self.dice)

    def __getitem__(self, index: int) -> Die:
        return self.dice[index]

    @property
    def values(self) -> tuple[int, ...]:
        return tuple(die.value for die in self.dice)

    @property
    def held_indices(self) -> tuple[int, ...]:
        return tuple(die.slot for die in self.dice if die.is_held)

    @property
    def available_indices(self) -> tuple[int, ...]:
        return tuple(die.slot for die in self.dice if not die.is_held)

    @property
    def all_held(self) -> bool:
        return all(die.is_held for die in self.dice)

    def with_values(self, indices: Sequence[int], values: Sequence[int]) -> "DiceSet":
        """Return a copy with new face values written to the given slots."""
        if len(indices) != len(values):
            raise ValueError(f"Got {len(values)} values for {len(indices)} dice.")
        updates = dict(zip(indices, values))
        return DiceSet(dice=tuple(
            replace(die, value=updates[die.slot]) if die.slot in updates else die
            for die in self.dice
        ))

    def hold(self, index: int) -> "DiceSet":
        return self._set_state(index, DieState.HELD)

    def release(self, index: int) -> "DiceSet":
        return self._set_state(index, DieState.AVAILABLE)

    def release_all(self) -> "DiceSet":
        return DiceSet(dice=tuple(replace(die, state=DieState.AVAILABLE) for die in self.dice))

    def _set_state(self, index: int, state: DieState) -> "DiceSet":
        return DiceSet(dice=tuple(
            replace(die, state=state) if die.slot == index else die
            for die in self.dice
        ))


@dataclass(frozen=True)
class TurnState:
    """
    Complete state of a player's turn.

    Attributes:
        dice: The six dice on the board
        phase: Where the turn is in its state machine
        turn_total: Points accumulated this turn (not yet banked)
        segment_start_score: turn_total when the current roll segment began
        current_roll_score: Score of the current segment (potential, then selected)
        current_roll_indices: Slots rolled by the most recent roll action
        holdable_indices: Slots of the current segment that may be held
        scored_indices: Slots that scored in the finished segments of this turn
        can_roll_hot_dice: All six dice are validly held, next roll uses all six
        roll_count: Number of rolls taken this turn
        missed_minimum: The turn ended by banking below the on-board minimum
    """
    dice: DiceSet = field(default_factory=DiceSet.initial)
    phase: TurnPhase = TurnPhase.AWAITING_ROLL
    turn_total: int = 0
    segment_start_score: int = 0
    current_roll_score: int = 0
    current_roll_indices: tuple[int, ...] = field(default_factory=tuple)
    holdable_indices: frozenset[int] = field(default_factory=frozenset)
    scored_indices: frozenset[int] = field(default_factory=frozenset)
    can_roll_hot_dice: bool = False
    roll_count: int = 0
    missed_minimum: bool = False

    @property
    def must_select_die(self) -> bool:
        return self.phase is TurnPhase.AWAITING_SELECTION

    @property
    def is_bust(self) -> bool:
        return self.phase is TurnPhase.BUSTED

    @property
    def is_banked(self) -> bool:
        return self.phase is TurnPhase.BANKED

    @property
    def is_finished(self) -> bool:
        return self.phase in (TurnPhase.BUSTED, TurnPhase.BANKED)

    @property
    def recorded_score(self) -> int:
        """What goes on the score sheet for this turn."""
        return self.turn_total if self.is_banked else 0

    @property
    def held_segment_indices(self) -> tuple[int, ...]:
        """Held slots that belong to the current roll segment."""
        return tuple(i for i in self.current_roll_indices if self.dice[i].is_held)


@dataclass(frozen=True)
class PlayerState:
    """
    A player's standing in the game.

    Attributes:
        name: Display name
        total: Banked points
        is_on_board: Has banked at least the qualifying minimum once
        scores: Per-turn banked amounts, 0 for busts
    """
    name: str
    total: int = 0
    is_on_board: bool = False
    scores: tuple[int, ...] = field(default_factory=tuple)

    def record_bank(self, amount: int) -> "PlayerState":
        return replace(
            self,
            total=self.total + amount,
            is_on_board=True,
            scores=self.scores + (amount,),
        )

    def record_bust(self) -> "PlayerState":
        return replace(self, scores=self.scores + (0,))


@dataclass(frozen=True)
class GameConfig:
    """
    Rule constants for a game session.

    Attributes:
        min_score_to_board: Points a single turn must bank to get on the board
        winning_score: Total that triggers the final round
    """
    min_score_to_board: int = 500
    winning_score: int = 10000

    NUM_DICE: ClassVar[int] = NUM_DICE

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.min_score_to_board < 0:
            raise ValueError("Minimum score to get on the board cannot be negative.")
        if self.winning_score <= 0:
            raise ValueError("Winning score must be positive.")

    @classmethod
    def from_settings(cls, settings) -> "GameConfig":
        """Build the rule constants from application settings."""
        return cls(
            min_score_to_board=settings.min_score_to_board,
            winning_score=settings.winning_score,
        )


@dataclass(frozen=True)
class PlayerAction:
    """
    A single user action sent by the presentation layer.

    Attributes:
        kind: Which action
        die_index: Slot to toggle (TOGGLE_HOLD only)
        player_names: New seating (RESET_NEW_SEATING only)
    """
    kind: ActionType
    die_index: int | None = None
    player_names: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def roll(cls) -> "PlayerAction":
        return cls(kind=ActionType.ROLL)

    @classmethod
    def toggle_hold(cls, die_index: int) -> "PlayerAction":
        return cls(kind=ActionType.TOGGLE_HOLD, die_index=die_index)

    @classmethod
    def bank(cls) -> "PlayerAction":
        return cls(kind=ActionType.BANK)

    @classmethod
    def reset_same_seating(cls) -> "PlayerAction":
        return cls(kind=ActionType.RESET_SAME_SEATING)

    @classmethod
    def reset_new_seating(cls, player_names: Sequence[str]) -> "PlayerAction":
        return cls(kind=ActionType.RESET_NEW_SEATING, player_names=tuple(player_names))


@dataclass(frozen=True)
class GameState:
    """
    Complete state of a Farkle game.

    Attributes:
        players: Player standings in seating order
        config: Rule constants
        turn: The live turn of the current player
        current_player_index: Whose turn it is
        phase: Normal play, final round, tie-breaker, over or error
        final_round_triggered_by: Player who first reached the winning score
        players_completed_final_round: Per-player final round completion
        tie_breaker_participants: Players in the current tie-breaker round
        tie_breaker_scores: Per-player score for the current tie-breaker round
        tie_breaker_completed: Per-player tie-breaker completion
        winner: Index of the winner once the game is over
        last_turn: Most recently finished turn (for result display)
        error_reason: Diagnostic text when phase is ERROR
    """
    players: tuple[PlayerState, ...]
    config: GameConfig = field(default_factory=GameConfig)
    turn: TurnState = field(default_factory=TurnState)
    current_player_index: int = 0
    phase: GamePhase = GamePhase.NORMAL
    final_round_triggered_by: int | None = None
    players_completed_final_round: tuple[bool, ...] = field(default_factory=tuple)
    tie_breaker_participants: tuple[int, ...] = field(default_factory=tuple)
    tie_breaker_scores: tuple[int, ...] = field(default_factory=tuple)
    tie_breaker_completed: tuple[bool, ...] = field(default_factory=tuple)
    winner: int | None = None
    last_turn: TurnState | None = None
    error_reason: str | None = None

    @property
    def current_player(self) -> PlayerState:
        return self.players[self.current_player_index]

    @property
    def player_names(self) -> tuple[str, ...]:
        return tuple(player.name for player in self.players)

    @property
    def totals(self) -> tuple[int, ...]:
        return tuple(player.total for player in self.players)

    @property
    def is_over(self) -> bool:
        return self.phase in (GamePhase.OVER, GamePhase.ERROR)

    @property
    def is_final_round_active(self) -> bool:
        return self.phase is GamePhase.FINAL_ROUND

    @property
    def is_tie_breaker_active(self) -> bool:
        return self.phase is GamePhase.TIE_BREAKER

    @property
    def winner_name(self) -> str | None:
        if self.winner is None:
            return None
        return self.players[self.winner].name
