# chess_coach/core/presentation.py
"""
Pure helpers that turn a `GameSnapshot` into text and highlight data for the
views. They hold no Qt dependencies so that they can be tested in isolation.
"""
from enum import Enum
from typing import Dict, Final, List, Optional, Sequence, Tuple

import chess

from chess_coach.types import (AppliedMove, CapturedPieces, GameSnapshot,
                               InteractionState, Side, SquareId, Winner)


class Highlight(str, Enum):
    SELECTED = "selected"
    LAST_MOVE = "last_move"
    CHECK = "check"


# Unicode glyphs, keyed by (side, piece kind).
PIECE_GLYPHS: Final[Dict[Tuple[Side, str], str]] = {
    (Side.WHITE if color == chess.WHITE else Side.BLACK, chess.piece_symbol(piece_type)):
        chess.Piece(piece_type, color).unicode_symbol()
    for color in chess.COLORS
    for piece_type in chess.PIECE_TYPES
}

# Sort order used when listing captured pieces, most valuable first.
_CAPTURE_ORDER: Final[str] = "qrbnp"


def move_rows(history: Sequence[AppliedMove]) -> List[Tuple[int, str, str]]:
    """Pairs the history into (move number, white SAN, black SAN) rows."""
    rows = []
    for index in range(0, len(history), 2):
        white_san = history[index].san
        black_san = history[index + 1].san if index + 1 < len(history) else ""
        rows.append((index // 2 + 1, white_san, black_san))
    return rows


def game_over_text(snapshot: GameSnapshot) -> Optional[str]:
    if snapshot.winner is None:
        return None
    if snapshot.winner is Winner.DRAW:
        return "Draw!"
    side = Side(snapshot.winner.value)
    return f"Checkmate! {side.display_name} wins!"


def status_text(snapshot: GameSnapshot) -> str:
    over = game_over_text(snapshot)
    if over:
        return over
    text = f"{snapshot.turn.display_name} to move"
    if snapshot.is_check:
        text += " - check!"
    return text


def captured_text(captured: CapturedPieces, side: Side) -> str:
    """Renders the pieces of `side` that have been captured, most valuable first."""
    kinds = sorted(captured.for_side(side), key=_CAPTURE_ORDER.index)
    return "".join(PIECE_GLYPHS[(side, kind)] for kind in kinds)


def _king_square(fen: str, side: Side) -> Optional[SquareId]:
    board = chess.Board(fen)
    square = board.king(chess.WHITE if side is Side.WHITE else chess.BLACK)
    return chess.square_name(square) if square is not None else None


def highlighted_squares(snapshot: GameSnapshot, interaction: InteractionState) -> Dict[SquareId, Highlight]:
    """
    Returns the highlight role of every highlighted square.

    Later entries win: the check highlight overrides the selection, which
    overrides the last-move highlight.
    """
    highlights: Dict[SquareId, Highlight] = {}
    last_move = snapshot.last_move
    if last_move is not None:
        highlights[last_move.origin] = Highlight.LAST_MOVE
        highlights[last_move.destination] = Highlight.LAST_MOVE
    if interaction.selected_square is not None:
        highlights[interaction.selected_square] = Highlight.SELECTED
    if snapshot.is_check:
        king = _king_square(snapshot.fen, snapshot.turn)
        if king is not None:
            highlights[king] = Highlight.CHECK
    return highlights
