# chess_coach/core/capture_aggregator.py
"""
Derives the captured pieces of each side from the move history.
"""
from typing import Iterable, List

from chess_coach.types import AppliedMove, CapturedPieces, PieceKind, Side


def derive_captures(history: Iterable[AppliedMove]) -> CapturedPieces:
    """
    Groups every captured piece kind under the colour of the captured piece.

    The mover always takes an opponent's piece, so each capture is attributed
    to the side opposite the mover. The result depends on `history` alone and
    is recomputed on every call, which keeps it correct after an undo.
    """
    white: List[PieceKind] = []
    black: List[PieceKind] = []
    for move in history:
        if move.captured is None:
            continue
        if move.side.opponent is Side.WHITE:
            white.append(move.captured)
        else:
            black.append(move.captured)
    return CapturedPieces(white=tuple(white), black=tuple(black))
