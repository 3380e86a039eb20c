# tests/core/test_feedback_classifier.py
from chess_coach.core.feedback_classifier import classify_feedback
from chess_coach.types import (AppliedMove, DrawConditions, FeedbackEvent,
                               MoveOutcome, Side)


def make_outcome(captured=None, is_check=False, is_checkmate=False, draw=DrawConditions()):
    move = AppliedMove(origin="h5", destination="f7", piece="q", side=Side.WHITE, san="Qxf7", captured=captured)
    return MoveOutcome(move=move, is_check=is_check, is_checkmate=is_checkmate, draw=draw)


def test_quiet_move_is_move():
    assert classify_feedback(make_outcome()) == FeedbackEvent.MOVE

def test_capture_is_capture():
    assert classify_feedback(make_outcome(captured="p")) == FeedbackEvent.CAPTURE

def test_check_beats_capture():
    assert classify_feedback(make_outcome(captured="p", is_check=True)) == FeedbackEvent.CHECK

def test_checkmating_capture_is_end():
    # A mating move also gives check and here captures; only END may be reported.
    outcome = make_outcome(captured="p", is_check=True, is_checkmate=True)
    assert classify_feedback(outcome) == FeedbackEvent.END

def test_every_draw_condition_is_end():
    for draw in (
        DrawConditions(stalemate=True),
        DrawConditions(insufficient_material=True),
        DrawConditions(repetition=True),
        DrawConditions(fifty_moves=True),
    ):
        assert classify_feedback(make_outcome(captured="r", draw=draw)) == FeedbackEvent.END
