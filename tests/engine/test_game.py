"""
Farkle - Game Controller Tests

Tests for multi-player turn order, the final round, tie-breakers and the
action dispatcher.
"""

import pytest
from src.engine.base import (
    GamePhase,
    GameState,
    PlayerAction,
    PlayerState,
    TurnPhase,
    TurnState,
)
from src.engine.game import GameController
from src.engine.validators import GameSetupError


class TestNewGame:
    """Tests for game setup and resets."""

    def test_initial_state(self, two_player_game):
        state = two_player_game
        assert state.player_names == ("Alice", "Bob")
        assert state.totals == (0, 0)
        assert state.current_player_index == 0
        assert state.phase is GamePhase.NORMAL
        assert state.turn.phase is TurnPhase.AWAITING_ROLL
        assert state.final_round_triggered_by is None
        assert state.players_completed_final_round == (False, False)

    def test_names_are_stripped(self):
        state = GameController.new_game(["  Alice ", "Bob"])
        assert state.player_names == ("Alice", "Bob")

    @pytest.mark.parametrize("names", [
        [],
        ["Alice", ""],
        ["Alice", "   "],
        ["Alice", "Alice"],
        "Alice",
        ["Alice", 3],
    ])
    def test_invalid_seating_raises(self, names):
        with pytest.raises(GameSetupError):
            GameController.new_game(names)

    def test_setup_error_is_value_error(self):
        with pytest.raises(ValueError):
            GameController.new_game([])

    def test_reset_same_seating(self, two_player_game, play_turn):
        state = play_turn(two_player_game, (5, 5, 5, 2, 3, 4))
        assert state.totals == (500, 0)

        reset = GameController.reset_same_seating(state)
        assert reset.player_names == ("Alice", "Bob")
        assert reset.totals == (0, 0)
        assert reset.current_player_index == 0
        assert reset.config == state.config

    def test_reset_new_seating_via_action(self, two_player_game):
        action = PlayerAction.reset_new_seating(["Carol", "Dave", "Erin"])
        state = GameController.apply(two_player_game, action)
        assert state.player_names == ("Carol", "Dave", "Erin")
        assert state.players_completed_final_round == (False, False, False)

    def test_reset_new_seating_rejects_bad_names(self, two_player_game):
        with pytest.raises(GameSetupError):
            GameController.apply(two_player_game, PlayerAction.reset_new_seating(["Carol", "Carol"]))


class TestTurnProgression:
    """Tests for recording turns and advancing players."""

    def test_bank_updates_player_and_advances(self, two_player_game, play_turn):
        state = play_turn(two_player_game, (5, 5, 5, 2, 3, 4))
        alice = state.players[0]
        assert alice.total == 500
        assert alice.is_on_board
        assert alice.scores == (500,)
        assert state.current_player_index == 1
        assert state.turn == TurnState()
        assert state.last_turn.is_banked

    def test_bust_records_zero(self, two_player_game, bust_turn):
        state = bust_turn(two_player_game)
        assert state.players[0].scores == (0,)
        assert state.players[0].total == 0
        assert state.current_player_index == 1
        assert state.last_turn.is_bust

    def test_failed_minimum_bank_records_zero(self, two_player_game, play_turn):
        state = play_turn(two_player_game, (1, 2, 3, 4, 6, 6))
        alice = state.players[0]
        assert alice.total == 0
        assert alice.scores == (0,)
        assert not alice.is_on_board
        assert state.last_turn.missed_minimum
        assert state.current_player_index == 1

    def test_on_board_player_banks_small_amounts(self, two_player_game, play_turn, bust_turn):
        state = play_turn(two_player_game, (5, 5, 5, 2, 3, 4))
        state = bust_turn(state)
        state = play_turn(state, (1, 2, 3, 4, 6, 6))
        assert state.players[0].total == 600
        assert state.players[0].scores == (500, 100)

    def test_turn_order_wraps(self, bust_turn):
        state = GameController.new_game(["A", "B", "C"])
        order = []
        for _ in range(4):
            order.append(state.current_player_index)
            state = bust_turn(state)
        assert order == [0, 1, 2, 0]

    def test_illegal_actions_return_same_state(self, two_player_game):
        state = two_player_game
        assert GameController.bank(state) is state
        assert GameController.toggle_hold(state, 0) is state

        rolled = GameController.roll(state, (1, 2, 3, 4, 6, 6))
        assert GameController.roll(rolled, (1, 1, 1, 1, 1, 1)) is rolled
        assert GameController.toggle_hold(rolled, 3) is rolled

    def test_toggle_without_index_is_ignored(self, two_player_game):
        state = GameController.roll(two_player_game, (1, 2, 3, 4, 6, 6))
        action = PlayerAction(kind=PlayerAction.toggle_hold(0).kind)
        assert GameController.apply(state, action) is state


class TestFinalRound:
    """Tests for the extra turns after someone reaches the winning score."""

    def test_trigger_marks_player_complete(self, quick_config, play_turn):
        state = GameController.new_game(["A", "B", "C"], quick_config)
        state = play_turn(state, (1, 1, 1, 2, 3, 4))
        assert state.phase is GamePhase.FINAL_ROUND
        assert state.final_round_triggered_by == 0
        assert state.players_completed_final_round == (True, False, False)
        assert state.current_player_index == 1

    def test_every_other_player_gets_one_turn(self, quick_config, play_turn, bust_turn):
        state = GameController.new_game(["A", "B", "C"], quick_config)
        state = play_turn(state, (1, 1, 1, 2, 3, 4))

        extra_turns = 0
        while not state.is_over:
            state = bust_turn(state)
            extra_turns += 1

        assert extra_turns == 2
        assert state.phase is GamePhase.OVER
        assert state.winner == 0
        assert state.winner_name == "A"

    def test_skips_trigger_player_when_wrapping(self, quick_config, play_turn, bust_turn):
        state = GameController.new_game(["A", "B", "C"], quick_config)
        state = bust_turn(state)
        state = play_turn(state, (1, 1, 1, 2, 3, 4))
        assert state.final_round_triggered_by == 1
        assert state.current_player_index == 2

        state = bust_turn(state)
        assert state.current_player_index == 0

        state = bust_turn(state)
        assert state.phase is GamePhase.OVER
        assert state.winner == 1

    def test_later_player_can_overtake(self, quick_config, play_turn, bust_turn):
        state = GameController.new_game(["A", "B", "C"], quick_config)
        state = play_turn(state, (1, 1, 1, 2, 3, 4))
        state = play_turn(state, (1, 2, 3, 4, 5, 6))
        assert state.final_round_triggered_by == 0
        assert state.totals == (1000, 1500, 0)

        state = bust_turn(state)
        assert state.phase is GamePhase.OVER
        assert state.winner_name == "B"

    def test_single_player_game_ends_immediately(self, quick_config, play_turn):
        state = GameController.new_game(["Solo"], quick_config)
        state = play_turn(state, (1, 1, 1, 2, 3, 4))
        assert state.phase is GamePhase.OVER
        assert state.winner == 0

    def test_actions_after_game_over_are_ignored(self, quick_config, play_turn):
        state = play_turn(GameController.new_game(["Solo"], quick_config), (1, 1, 1, 2, 3, 4))
        assert GameController.roll(state) is state
        assert GameController.bank(state) is state
        assert GameController.toggle_hold(state, 0) is state

    def test_final_round_message(self, quick_config, play_turn):
        state = GameController.new_game(["A", "B"], quick_config)
        assert GameController.final_round_message(state) is None

        state = play_turn(state, (1, 1, 1, 2, 3, 4))
        message = GameController.final_round_message(state)
        assert "A reached 1000" in message


class TestTieBreaker:
    """Tests for resolving tied leaders."""

    def _tied_game(self, config, play_turn):
        state = GameController.new_game(["A", "B"], config)
        state = play_turn(state, (1, 1, 1, 2, 3, 4))
        return play_turn(state, (1, 1, 1, 2, 3, 4))

    def test_tie_starts_tie_breaker(self, quick_config, play_turn):
        state = self._tied_game(quick_config, play_turn)
        assert state.phase is GamePhase.TIE_BREAKER
        assert state.tie_breaker_participants == (0, 1)
        assert state.tie_breaker_scores == (0, 0)
        assert state.current_player_index == 0
        assert state.winner is None
        assert "Tie-breaker" in GameController.final_round_message(state)

    def test_unique_tie_breaker_winner(self, quick_config, play_turn):
        state = self._tied_game(quick_config, play_turn)
        state = play_turn(state, (5, 5, 5, 2, 3, 4))
        assert state.tie_breaker_scores[0] == 500
        assert state.current_player_index == 1

        state = play_turn(state, (6, 6, 6, 2, 3, 4))
        assert state.phase is GamePhase.OVER
        assert state.winner == 1
        # Tie-breaker points never reach the game totals or score sheets
        assert state.totals == (1000, 1000)
        assert state.players[1].scores == (1000,)

    def test_tie_breaker_scores_are_read_only(self, quick_config, play_turn):
        state = self._tied_game(quick_config, play_turn)
        state = play_turn(state, (5, 5, 5, 2, 3, 4))
        assert state.tie_breaker_scores == (500, 0)

        with pytest.raises(TypeError):
            state.tie_breaker_scores[0] = 999
        assert state.tie_breaker_scores == (500, 0)
        assert hash(state) == hash(state)

    def test_repeated_tie_replays_same_participants(self, quick_config, play_turn, bust_turn):
        state = self._tied_game(quick_config, play_turn)
        state = bust_turn(state)
        state = bust_turn(state)
        assert state.phase is GamePhase.TIE_BREAKER
        assert state.tie_breaker_participants == (0, 1)
        assert state.tie_breaker_scores == (0, 0)
        assert state.tie_breaker_completed == (False, False)

        state = play_turn(state, (5, 5, 5, 2, 3, 4))
        state = bust_turn(state)
        assert state.phase is GamePhase.OVER
        assert state.winner == 0

    def test_tie_breaker_narrows_to_tied_subset(self, quick_config, play_turn, bust_turn):
        state = GameController.new_game(["A", "B", "C"], quick_config)
        for _ in range(3):
            state = play_turn(state, (1, 1, 1, 2, 3, 4))
        assert state.tie_breaker_participants == (0, 1, 2)

        state = play_turn(state, (6, 6, 6, 2, 3, 4))
        state = play_turn(state, (6, 6, 6, 2, 3, 4))
        state = bust_turn(state)
        assert state.phase is GamePhase.TIE_BREAKER
        assert state.tie_breaker_participants == (0, 1)
        assert state.tie_breaker_completed == (False, False, True)
        assert state.current_player_index == 0

        state = bust_turn(state)
        assert state.current_player_index == 1
        state = play_turn(state, (5, 5, 5, 2, 3, 4))
        assert state.phase is GamePhase.OVER
        assert state.winner_name == "B"

    def test_tie_breaker_turn_order_skips_non_participants(self, quick_config, play_turn, bust_turn):
        state = GameController.new_game(["A", "B", "C"], quick_config)
        state = bust_turn(state)
        state = play_turn(state, (1, 1, 1, 2, 3, 4))
        state = play_turn(state, (1, 1, 1, 2, 3, 4))
        state = bust_turn(state)
        assert state.tie_breaker_participants == (1, 2)
        assert state.current_player_index == 1

        state = bust_turn(state)
        assert state.current_player_index == 2


class TestInvariantViolations:
    """Tests for the explicit error state."""

    def _on_board(self, *names: str) -> tuple[PlayerState, ...]:
        return tuple(PlayerState(name=n, total=1000, is_on_board=True, scores=(1000,)) for n in names)

    def test_tie_breaker_without_participants_errors(self):
        state = GameState(
            players=self._on_board("A", "B"),
            phase=GamePhase.TIE_BREAKER,
            turn=TurnState(turn_total=500),
            tie_breaker_completed=(False, False),
        )
        state = GameController.bank(state)
        assert state.phase is GamePhase.ERROR
        assert state.error_reason
        assert state.is_over

    def test_winner_outside_player_list_errors(self):
        state = GameState(players=self._on_board("A"))
        state = GameController._declare_winner(state, 5)
        assert state.phase is GamePhase.ERROR
        assert "outside" in state.error_reason

    def test_no_points_means_no_winner(self):
        state = GameState(players=(PlayerState("A"), PlayerState("B")))
        state = GameController._finish_game(state)
        assert state.phase is GamePhase.OVER
        assert state.winner is None
        assert state.winner_name is None

    def test_error_state_ignores_actions(self):
        state = GameState(players=self._on_board("A"), phase=GamePhase.ERROR, error_reason="x")
        assert GameController.roll(state) is state


class TestReadOnlyHelpers:
    """Tests for standings and round counting."""

    def test_standings_order(self, two_player_game, play_turn, bust_turn):
        state = bust_turn(two_player_game)
        state = play_turn(state, (5, 5, 5, 2, 3, 4))
        assert GameController.standings(state) == [("Bob", 500), ("Alice", 0)]

    def test_current_round(self, two_player_game, bust_turn):
        state = two_player_game
        assert GameController.current_round(state) == 1
        state = bust_turn(state)
        assert GameController.current_round(state) == 1
        state = bust_turn(state)
        assert GameController.current_round(state) == 2


class TestEndToEnd:
    """Full two-player game from scripted dice."""

    def test_two_player_scenario(self, two_player_game, play_turn, bust_turn):
        # Alice banks 550 over two segments
        state = play_turn(two_player_game, (5, 5, 5, 2, 3, 4), (5, 2, 3))
        assert state.players[0].total == 550
        assert state.players[0].is_on_board

        # Bob busts twice while Alice busts in between
        state = bust_turn(state)
        state = bust_turn(state)
        state = bust_turn(state)
        state = bust_turn(state)
        assert state.players[1].scores == (0, 0)
        assert state.current_player_index == 1

        # Bob rides hot dice three times, then banks 10050
        state = play_turn(
            state,
            (1, 1, 1, 1, 1, 1),
            (1, 1, 1, 1, 1, 1),
            (1, 1, 1, 1, 1, 1),
            (1, 1, 1, 1, 5, 2),
        )
        assert state.players[1].total == 10050
        assert state.phase is GamePhase.FINAL_ROUND
        assert state.final_round_triggered_by == 1
        assert state.current_player_index == 0

        # Alice's last turn busts and the game ends
        state = bust_turn(state)
        assert state.phase is GamePhase.OVER
        assert state.winner == 1
        assert state.winner_name == "Bob"
        assert state.totals == (550, 10050)
