"""
Farkle Game Engine.

Pure Python game logic with zero UI/database dependencies.
Handles dice rolling, scoring, turn flow, final rounds, tie-breakers and the
computer opponent.
"""

from src.engine.base import (
    ActionType,
    DiceRoll,
    DiceSet,
    Die,
    DieState,
    GameConfig,
    GamePhase,
    GameState,
    PlayerAction,
    PlayerState,
    ScoringBreakdown,
    ScoringCategory,
    ScoringOption,
    ScoringResult,
    TurnPhase,
    TurnState,
)
from src.engine.scoring import FarkleScoringEngine
from src.engine.segment import SegmentResolver, SegmentResult
from src.engine.turn import TurnController
from src.engine.game import GameController
from src.engine.ai import ComputerPlayer, FarkleAI, KeptDiceDecision
from src.engine.validators import GameSetupError

__all__ = [
    # Data Classes
    "DiceRoll",
    "DiceSet",
    "Die",
    "GameConfig",
    "GameState",
    "KeptDiceDecision",
    "PlayerAction",
    "PlayerState",
    "ScoringBreakdown",
    "ScoringOption",
    "ScoringResult",
    "SegmentResult",
    "TurnState",
    # Enums
    "ActionType",
    "DieState",
    "GamePhase",
    "ScoringCategory",
    "TurnPhase",
    # Engines
    "FarkleScoringEngine",
    "SegmentResolver",
    "TurnController",
    "GameController",
    "FarkleAI",
    "ComputerPlayer",
    # Errors
    "GameSetupError",
]
