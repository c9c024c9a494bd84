"""
Farkle - Game Controller

Orchestrates players, turn order, the final round that follows the first
player to reach the winning score, and tie-breaker rounds between tied
leaders.

Game Flow:
    NORMAL -> FINAL_ROUND (first bank reaching the winning score)
    FINAL_ROUND -> OVER (unique leader) | TIE_BREAKER (tied leaders)
    TIE_BREAKER -> OVER (unique tie-breaker leader) | TIE_BREAKER (tied again)
    any -> ERROR (internal invariant violated)

Every method takes a GameState and returns a new one. Illegal actions return
the same state object.
"""

from dataclasses import replace
from typing import Sequence
import logging

from src.engine.base import (
    ActionType,
    DiceRoll,
    GameConfig,
    GamePhase,
    GameState,
    PlayerAction,
    PlayerState,
    TurnState,
)
from src.engine.turn import TurnController
from src.engine.validators import validate_player_names

logger = logging.getLogger(__name__)


class GameController:
    """
    Stateless multi-player orchestration.

    All methods are class methods operating on immutable GameState values.
    """

    # =========================================================================
    # Setup
    # =========================================================================

    @classmethod
    def new_game(
        cls,
        player_names: Sequence[str],
        config: GameConfig | None = None
    ) -> GameState:
        """
        Start a game with the given seating.

        Args:
            player_names: Ordered, unique display names
            config: Rule constants (defaults: 500 to board, 10000 to win)

        Returns:
            Initial GameState with player 0 to act

        Raises:
            GameSetupError: If the seating is invalid
        """
        names = validate_player_names(player_names)
        config = config or GameConfig()

        logger.info("New game for %s (winning score %d)", ", ".join(names), config.winning_score)

        return GameState(
            players=tuple(PlayerState(name=name) for name in names),
            config=config,
            turn=TurnController.start_turn(),
            players_completed_final_round=tuple(False for _ in names),
            tie_breaker_completed=tuple(False for _ in names),
        )

    @classmethod
    def reset_same_seating(cls, state: GameState) -> GameState:
        """Start over with the same players in the same order."""
        return cls.new_game(state.player_names, state.config)

    @classmethod
    def reset_new_seating(
        cls,
        player_names: Sequence[str],
        config: GameConfig | None = None
    ) -> GameState:
        """Start over with a different set of players."""
        return cls.new_game(player_names, config)

    # =========================================================================
    # Actions
    # =========================================================================

    @classmethod
    def apply(
        cls,
        state: GameState,
        action: PlayerAction,
        roll: DiceRoll | Sequence[int] | None = None
    ) -> GameState:
        """
        Dispatch a single player action.

        Args:
            state: Current game state
            action: What the player did
            roll: Optional pre-determined dice for a ROLL action

        Returns:
            New game state (same object if the action had no effect)

        Raises:
            GameSetupError: If RESET_NEW_SEATING carries an invalid seating
        """
        if action.kind is ActionType.ROLL:
            return cls.roll(state, roll)
        if action.kind is ActionType.TOGGLE_HOLD:
            if action.die_index is None:
                logger.debug("Toggle action without a die index ignored")
                return state
            return cls.toggle_hold(state, action.die_index)
        if action.kind is ActionType.BANK:
            return cls.bank(state)
        if action.kind is ActionType.RESET_SAME_SEATING:
            return cls.reset_same_seating(state)
        if action.kind is ActionType.RESET_NEW_SEATING:
            return cls.reset_new_seating(action.player_names, state.config)

        logger.debug("Unknown action %r ignored", action.kind)
        return state

    @classmethod
    def roll(
        cls,
        state: GameState,
        roll: DiceRoll | Sequence[int] | None = None
    ) -> GameState:
        if state.is_over:
            return state

        turn = TurnController.roll(state.turn, roll)
        if turn is state.turn:
            return state
        if turn.is_finished:
            return cls._end_turn(state, turn)
        return replace(state, turn=turn)

    @classmethod
    def toggle_hold(cls, state: GameState, index: int) -> GameState:
        if state.is_over:
            return state

        turn = TurnController.toggle_hold(state.turn, index)
        if turn is state.turn:
            return state
        return replace(state, turn=turn)

    @classmethod
    def bank(cls, state: GameState) -> GameState:
        if state.is_over:
            return state

        player = state.current_player
        turn = TurnController.bank(
            state.turn,
            is_on_board=player.is_on_board,
            minimum_to_board=state.config.min_score_to_board,
        )
        if turn is state.turn:
            return state
        return cls._end_turn(state, turn)

    # =========================================================================
    # Turn end and advancement
    # =========================================================================

    @classmethod
    def _end_turn(cls, state: GameState, turn: TurnState) -> GameState:
        """Record a finished turn, check end conditions and advance."""
        state = replace(state, turn=turn, last_turn=turn)

        if state.phase is GamePhase.TIE_BREAKER:
            return cls._end_tie_breaker_turn(state, turn)

        index = state.current_player_index
        player = state.current_player
        if turn.is_banked:
            player = player.record_bank(turn.turn_total)
            logger.info("%s banked %d (total %d)", player.name, turn.turn_total, player.total)
        else:
            player = player.record_bust()
            logger.info("%s scored nothing this turn", player.name)

        players = state.players[:index] + (player,) + state.players[index + 1:]
        state = replace(state, players=players)

        if state.phase is GamePhase.FINAL_ROUND:
            state = cls._mark_final_round_complete(state, index)
        elif turn.is_banked and player.total >= state.config.winning_score:
            logger.info(
                "%s reached %d, final round begins", player.name, player.total
            )
            state = replace(
                state,
                phase=GamePhase.FINAL_ROUND,
                final_round_triggered_by=index,
            )
            state = cls._mark_final_round_complete(state, index)

        if state.phase is GamePhase.FINAL_ROUND and all(state.players_completed_final_round):
            return cls._finish_game(state)

        return cls._advance(state)

    @classmethod
    def _mark_final_round_complete(cls, state: GameState, index: int) -> GameState:
        completed = list(state.players_completed_final_round)
        completed[index] = True
        return replace(state, players_completed_final_round=tuple(completed))

    @classmethod
    def _advance(cls, state: GameState) -> GameState:
        """Move to the next eligible player and reset the turn."""
        count = len(state.players)
        current = state.current_player_index

        if state.phase is GamePhase.TIE_BREAKER:
            participants = state.tie_breaker_participants
            if not participants:
                return cls._fail(state, "Tie-breaker active with no participants.")
            pending = [i for i in participants if not state.tie_breaker_completed[i]]
            if not pending:
                return cls._fail(state, "Tie-breaker advanced after every participant finished.")
            # Cycle within the participant list, starting after the current player
            later = [i for i in pending if i > current]
            next_index = later[0] if later else pending[0]
        elif state.phase is GamePhase.FINAL_ROUND:
            next_index = None
            for step in range(1, count + 1):
                candidate = (current + step) % count
                if not state.players_completed_final_round[candidate]:
                    next_index = candidate
                    break
            if next_index is None:
                return cls._fail(state, "Final round advanced after every player finished.")
        else:
            next_index = (current + 1) % count

        return replace(
            state,
            current_player_index=next_index,
            turn=TurnController.start_turn(),
        )

    # =========================================================================
    # Game end and tie-breakers
    # =========================================================================

    @classmethod
    def _finish_game(cls, state: GameState) -> GameState:
        """Compare totals once the final round is complete."""
        best = max(state.totals)
        if best == 0:
            logger.info("Game over with no points scored, no winner")
            return replace(state, phase=GamePhase.OVER, winner=None)

        leaders = tuple(i for i, total in enumerate(state.totals) if total == best)
        if len(leaders) == 1:
            return cls._declare_winner(state, leaders[0])
        return cls._start_tie_breaker(state, leaders)

    @classmethod
    def _start_tie_breaker(cls, state: GameState, participants: tuple[int, ...]) -> GameState:
        """Begin a tie-breaker round among the given players."""
        if not participants:
            return cls._fail(state, "Tie-breaker requested with no participants.")

        logger.info(
            "Tie-breaker between %s",
            ", ".join(state.players[i].name for i in participants),
        )
        return replace(
            state,
            phase=GamePhase.TIE_BREAKER,
            tie_breaker_participants=participants,
            tie_breaker_scores=(0,) * len(state.players),
            tie_breaker_completed=tuple(i not in participants for i in range(len(state.players))),
            current_player_index=participants[0],
            turn=TurnController.start_turn(),
        )

    @classmethod
    def _end_tie_breaker_turn(cls, state: GameState, turn: TurnState) -> GameState:
        """Record a tie-breaker score; totals and score sheets are untouched."""
        index = state.current_player_index
        if index not in state.tie_breaker_participants:
            return cls._fail(state, f"Player {index} is not a tie-breaker participant.")

        scores = list(state.tie_breaker_scores)
        scores[index] = turn.recorded_score
        completed = list(state.tie_breaker_completed)
        completed[index] = True
        state = replace(
            state,
            tie_breaker_scores=tuple(scores),
            tie_breaker_completed=tuple(completed),
        )

        logger.info("%s scored %d in the tie-breaker", state.current_player.name, scores[index])

        if all(state.tie_breaker_completed):
            return cls._resolve_tie_breaker(state)
        return cls._advance(state)

    @classmethod
    def _resolve_tie_breaker(cls, state: GameState) -> GameState:
        participants = state.tie_breaker_participants
        if not participants:
            return cls._fail(state, "Tie-breaker resolved with no participants.")

        best = max(state.tie_breaker_scores[i] for i in participants)
        leaders = tuple(i for i in participants if state.tie_breaker_scores[i] == best)

        if not leaders:
            return cls._fail(state, "Tie-breaker produced no leaders.")
        if len(leaders) == 1:
            return cls._declare_winner(state, leaders[0])
        return cls._start_tie_breaker(state, leaders)

    @classmethod
    def _declare_winner(cls, state: GameState, index: int) -> GameState:
        if not (0 <= index < len(state.players)):
            return cls._fail(state, f"Winner index {index} is outside the player list.")

        winner = state.players[index]
        logger.info("%s wins with %d", winner.name, winner.total)
        return replace(state, phase=GamePhase.OVER, winner=index)

    @classmethod
    def _fail(cls, state: GameState, reason: str) -> GameState:
        logger.error("Game halted: %s", reason)
        return replace(state, phase=GamePhase.ERROR, error_reason=reason)

    # =========================================================================
    # Read-only helpers
    # =========================================================================

    @classmethod
    def standings(cls, state: GameState) -> list[tuple[str, int]]:
        """Players ordered by total, highest first (seating order on ties)."""
        ranked = sorted(
            enumerate(state.players),
            key=lambda item: (-item[1].total, item[0]),
        )
        return [(player.name, player.total) for _, player in ranked]

    @classmethod
    def current_round(cls, state: GameState) -> int:
        """Round number shown to players: fewest recorded turns plus one."""
        return min(len(player.scores) for player in state.players) + 1

    @classmethod
    def final_round_message(cls, state: GameState) -> str | None:
        """Banner text while a final round or tie-breaker is in progress."""
        if state.phase is GamePhase.FINAL_ROUND and state.final_round_triggered_by is not None:
            trigger = state.players[state.final_round_triggered_by]
            return (
                f"Final round! {trigger.name} reached {trigger.total}. "
                f"Everyone else gets one last turn."
            )
        if state.phase is GamePhase.TIE_BREAKER:
            names = ", ".join(state.players[i].name for i in state.tie_breaker_participants)
            return f"Tie-breaker! {names} each take one more turn."
        return None
