# chess_coach/core/feedback_classifier.py
"""
Maps the outcome of a move to the single feedback cue it should trigger.

The checks run in strict priority order and the first match wins, so a
capturing checkmate reports `END`, and a capturing check reports `CHECK`.
"""
from chess_coach.types import FeedbackEvent, MoveOutcome


def classify_feedback(outcome: MoveOutcome) -> FeedbackEvent:
    """
    Classifies a successfully applied move.

    Args:
        outcome: The rules engine's metadata for the move.

    Returns:
        `END` if the game is over, else `CHECK`, `CAPTURE` or `MOVE`.
    """
    if outcome.is_game_over:
        return FeedbackEvent.END
    if outcome.is_check:
        return FeedbackEvent.CHECK
    if outcome.move.is_capture:
        return FeedbackEvent.CAPTURE
    return FeedbackEvent.MOVE
