# chess_coach/exceptions.py
"""
Defines custom exceptions for the Chess Coach application.

Every error below is recovered close to where it is raised: an illegal move
leaves the board untouched, an unavailable coach produces a placeholder
message and a failed sound is logged. The common `ChessCoachError` base lets
callers catch any of them in one place.
"""

from typing import Optional


class ChessCoachError(Exception):
    """Base class for all application-specific, catchable errors."""
    pass


class RulesEngineError(ChessCoachError):
    """Base class for errors reported by the rules-engine adapter."""
    pass


class IllegalMoveError(RulesEngineError):
    """
    Raised when the rules engine rejects an attempted move.

    This covers malformed square names, an empty origin square, moving the
    opponent's piece, blocked paths and moves that leave the own king in check.

    Attributes:
        origin: The square the move started from.
        destination: The square the move was aimed at.
    """
    def __init__(self, message: str, origin: Optional[str] = None, destination: Optional[str] = None):
        super().__init__(message)
        self.origin = origin
        self.destination = destination


class InvalidPositionError(RulesEngineError):
    """Raised when a FEN string cannot be loaded as a board position."""
    pass


class AdvisoryUnavailableError(ChessCoachError):
    """Raised when the AI coach fails, times out or returns no text."""
    pass


class AudioPlaybackError(ChessCoachError):
    """Raised by a sound backend when a cue cannot be played."""
    pass
