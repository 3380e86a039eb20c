# tests/orchestration/test_move_orchestrator.py
from unittest.mock import MagicMock

import chess
import pytest

from chess_coach.exceptions import IllegalMoveError
from chess_coach.orchestration.orchestrator import MoveOrchestrator
from chess_coach.services.rules_engine import PythonChessRulesEngine
from chess_coach.types import (CapturedPieces, FeedbackEvent, InteractionState,
                               Side, Winner)

SCHOLARS_MATE = ("e2e4", "e7e5", "f1c4", "b8c6", "d1h5", "g8f6", "h5f7")


@pytest.fixture
def events():
    return []

@pytest.fixture
def state_callback():
    return MagicMock()

@pytest.fixture
def orchestrator(events, state_callback):
    return MoveOrchestrator(PythonChessRulesEngine(), events.append, state_callback)

def play(orchestrator, *moves):
    return [orchestrator.attempt_move(uci[:2], uci[2:]) for uci in moves]


class TestMoves:
    def test_initial_state(self, orchestrator, events):
        snapshot = orchestrator.snapshot

        assert snapshot.fen == chess.STARTING_FEN
        assert snapshot.turn == Side.WHITE
        assert snapshot.history == ()
        assert orchestrator.interaction.is_idle
        assert orchestrator.advisory_text is None
        assert events == []

    def test_opening_moves_update_the_snapshot(self, orchestrator, events, state_callback):
        # Act
        moves = play(orchestrator, "e2e4", "e7e5")

        # Assert
        assert [move.san for move in moves] == ["e4", "e5"]
        snapshot = orchestrator.snapshot
        assert snapshot.turn == Side.WHITE
        assert [move.san for move in snapshot.history] == ["e4", "e5"]
        assert snapshot.fen == "rnbqkbnr/pppp1ppp/8/4p3/4P3/8/PPPP1PPP/RNBQKBNR w KQkq - 0 2"
        assert events == [FeedbackEvent.MOVE, FeedbackEvent.MOVE]
        assert state_callback.call_count == 2
        assert orchestrator.position_version == 2

    def test_capture_and_check_events(self, orchestrator, events):
        play(orchestrator, "e2e4", "d7d5", "e4d5", "d8d5", "b1c3", "d5e5")
        assert events[2] == FeedbackEvent.CAPTURE
        assert events[3] == FeedbackEvent.CAPTURE
        assert events[-1] == FeedbackEvent.CHECK
        assert orchestrator.snapshot.is_check
        assert orchestrator.snapshot.captured.white == ("p",)
        assert orchestrator.snapshot.captured.black == ("p",)

    def test_illegal_move_changes_nothing(self, orchestrator, events, state_callback):
        before = orchestrator.snapshot

        assert orchestrator.attempt_move("e4", "e5") is None
        assert orchestrator.attempt_move("e2", "e5") is None

        assert orchestrator.snapshot is before
        assert orchestrator.position_version == 0
        assert events == []
        state_callback.assert_not_called()

    def test_checkmate_ends_the_game(self, orchestrator, events):
        play(orchestrator, *SCHOLARS_MATE)

        snapshot = orchestrator.snapshot
        assert snapshot.is_checkmate and snapshot.is_terminal
        assert snapshot.winner == Winner.WHITE
        assert events[-1] == FeedbackEvent.END

        assert orchestrator.attempt_move("a7", "a6") is None
        assert orchestrator.snapshot is snapshot
        assert len(events) == len(SCHOLARS_MATE)

    def test_stalemate_is_a_draw(self, events):
        orchestrator = MoveOrchestrator(PythonChessRulesEngine("7k/8/5Q2/6K1/8/8/8/8 w - - 0 1"), events.append)
        orchestrator.attempt_move("f6", "f7")

        assert orchestrator.snapshot.is_draw
        assert orchestrator.snapshot.winner == Winner.DRAW
        assert events == [FeedbackEvent.END]

    def test_promotion_hint_is_ignored_on_ordinary_moves(self, orchestrator, events):
        move = orchestrator.attempt_move("e2", "e4", "q")

        assert move is not None
        assert move.san == "e4"
        assert move.promotion is None
        assert events == [FeedbackEvent.MOVE]

    def test_promotion_hint_chooses_the_piece(self, events):
        orchestrator = MoveOrchestrator(PythonChessRulesEngine("8/P7/8/8/8/8/k7/4K3 w - - 0 1"), events.append)
        move = orchestrator.attempt_move("a7", "a8", "n")

        assert move.promotion == "n"
        assert orchestrator.snapshot.fen.startswith("N7/")


class TestUndoAndReset:
    def test_undo_on_empty_history_is_a_noop(self, orchestrator, events, state_callback):
        # Arrange
        request = orchestrator.begin_advisory()
        orchestrator.complete_advisory(request, "Open with a centre pawn.")
        orchestrator.click_square("e2")
        before = orchestrator.snapshot
        interaction = orchestrator.interaction
        state_callback.reset_mock()

        # Act
        undone = orchestrator.undo_last_move()

        # Assert
        assert undone is False
        assert orchestrator.snapshot is before
        assert orchestrator.interaction == interaction
        assert orchestrator.interaction.selected_square == "e2"
        assert orchestrator.advisory_text == "Open with a centre pawn."
        assert orchestrator.position_version == 0
        assert events == []
        state_callback.assert_not_called()

    def test_undo_takes_back_a_capture_with_a_move_event(self, orchestrator, events):
        play(orchestrator, "e2e4", "d7d5", "e4d5")

        assert orchestrator.undo_last_move() is True

        snapshot = orchestrator.snapshot
        assert [move.san for move in snapshot.history] == ["e4", "d5"]
        assert snapshot.captured.black == ()
        assert snapshot.turn == Side.WHITE
        assert events[-1] == FeedbackEvent.MOVE

    def test_undo_reopens_a_finished_game(self, orchestrator):
        play(orchestrator, *SCHOLARS_MATE)
        orchestrator.undo_last_move()

        assert not orchestrator.snapshot.is_terminal
        assert orchestrator.attempt_move("h5", "f7") is not None

    def test_reset_mid_game(self, orchestrator, events):
        # Arrange
        play(orchestrator, "e2e4", "d7d5", "e4d5")
        request = orchestrator.begin_advisory()
        orchestrator.complete_advisory(request, "White is a pawn up.")
        orchestrator.click_square("d8")
        assert orchestrator.snapshot.captured.black == ("p",)

        # Act
        orchestrator.reset_game()

        # Assert
        snapshot = orchestrator.snapshot
        assert snapshot.fen == chess.STARTING_FEN
        assert snapshot.history == ()
        assert snapshot.captured == CapturedPieces()
        assert snapshot.winner is None
        assert orchestrator.interaction.is_idle
        assert orchestrator.advisory_text is None
        assert events[-1] == FeedbackEvent.START


class TestClicks:
    def test_select_then_move(self, orchestrator, events):
        assert orchestrator.click_square("e2") is None
        assert orchestrator.interaction.selected_square == "e2"
        assert orchestrator.interaction.legal_destinations == frozenset({"e3", "e4"})

        move = orchestrator.click_square("e4")

        assert move.san == "e4"
        assert orchestrator.interaction.is_idle
        assert events == [FeedbackEvent.MOVE]

    def test_click_selected_square_deselects(self, orchestrator, state_callback):
        orchestrator.click_square("e2")
        orchestrator.click_square("e2")

        assert orchestrator.interaction == InteractionState.idle()
        assert state_callback.call_count == 2

    def test_click_opponent_piece_is_ignored(self, orchestrator, state_callback):
        orchestrator.click_square("e7")
        assert orchestrator.interaction.is_idle
        state_callback.assert_not_called()

    def test_unknown_square_is_ignored(self, orchestrator):
        assert orchestrator.click_square("z9") is None
        assert orchestrator.interaction.is_idle

    def test_rejected_attempt_keeps_the_selection(self, events):
        # Arrange
        engine = MagicMock(wraps=PythonChessRulesEngine())
        engine.apply_move.side_effect = IllegalMoveError("rejected", "e2", "e4")
        orchestrator = MoveOrchestrator(engine, events.append)
        orchestrator.click_square("e2")

        # Act
        move = orchestrator.click_square("e4")

        # Assert
        assert move is None
        assert orchestrator.interaction.selected_square == "e2"
        assert events == []


class TestAdvisory:
    def test_request_and_complete(self, orchestrator):
        play(orchestrator, "e2e4")
        request = orchestrator.begin_advisory()

        assert request.fen == orchestrator.snapshot.fen
        assert request.moves == ("e4",)
        assert orchestrator.is_analyzing

        assert orchestrator.complete_advisory(request, "White is better.") is True
        assert orchestrator.advisory_text == "White is better."
        assert not orchestrator.is_analyzing

    def test_duplicate_request_for_same_position_is_refused(self, orchestrator):
        assert orchestrator.begin_advisory() is not None
        assert orchestrator.begin_advisory() is None

    def test_result_for_an_old_position_is_discarded(self, orchestrator):
        request = orchestrator.begin_advisory()
        play(orchestrator, "e2e4")

        assert orchestrator.complete_advisory(request, "Stale.") is False
        assert orchestrator.advisory_text is None
        assert not orchestrator.is_analyzing

    def test_superseded_request_is_discarded(self, orchestrator):
        first = orchestrator.begin_advisory()
        play(orchestrator, "e2e4")
        second = orchestrator.begin_advisory()

        assert orchestrator.complete_advisory(first, "Old.") is False
        assert orchestrator.is_analyzing
        assert orchestrator.complete_advisory(second, "New.") is True
        assert orchestrator.advisory_text == "New."

    def test_position_change_clears_the_advisory(self, orchestrator):
        request = orchestrator.begin_advisory()
        orchestrator.complete_advisory(request, "Play e4.")

        play(orchestrator, "e2e4")

        assert orchestrator.advisory_text is None

    def test_position_change_stops_analyzing(self, orchestrator):
        # Arrange
        request = orchestrator.begin_advisory()

        # Act
        play(orchestrator, "e2e4")

        # Assert
        assert not orchestrator.is_analyzing
        assert orchestrator.begin_advisory() is not None
        assert orchestrator.complete_advisory(request, "Too late.") is False
        assert orchestrator.advisory_text is None
