# chess_coach/services/rules_engine.py
"""
Provides a concrete implementation of the `RulesEngine` protocol on top of
`python-chess`.

The adapter exclusively owns a `chess.Board`, which is the authoritative
position of the game. Nothing else in the application touches the board
directly: the orchestrator mutates it only through `apply_move`, `undo` and
`reset`, and everything renderable is derived from the query methods.
"""

from typing import FrozenSet, List, Optional, Tuple

import chess
import structlog

from chess_coach.exceptions import IllegalMoveError, InvalidPositionError
from chess_coach.types import (FEN, AppliedMove, DrawConditions, MoveOutcome,
                               PieceKind, RulesEngine, Side, SquareId)

logger = structlog.get_logger(__name__)


def _side_of(color: chess.Color) -> Side:
    return Side.WHITE if color == chess.WHITE else Side.BLACK


def _parse_square(square: SquareId) -> chess.Square:
    try:
        return chess.parse_square(square)
    except ValueError as e:
        raise IllegalMoveError(f"Unknown square: {square!r}") from e


def _captured_kind(board: chess.Board, move: chess.Move) -> Optional[PieceKind]:
    """Returns the kind of piece `move` takes on `board`, or None for a quiet move."""
    if board.is_en_passant(move):
        return chess.piece_symbol(chess.PAWN)
    if board.is_castling(move):
        # python-chess encodes castling as king-takes-rook in Chess960 mode.
        return None
    captured = board.piece_at(move.to_square)
    return chess.piece_symbol(captured.piece_type) if captured else None


def describe_move(board: chess.Board, move: chess.Move) -> AppliedMove:
    """Builds the history record of `move`, which must be legal on `board` (not yet pushed)."""
    piece = board.piece_at(move.from_square)
    if piece is None:
        raise IllegalMoveError(f"No piece on {chess.square_name(move.from_square)}.")
    return AppliedMove(
        origin=chess.square_name(move.from_square),
        destination=chess.square_name(move.to_square),
        piece=chess.piece_symbol(piece.piece_type),
        side=_side_of(piece.color),
        san=board.san(move),
        promotion=chess.piece_symbol(move.promotion) if move.promotion else None,
        captured=_captured_kind(board, move),
    )


class PythonChessRulesEngine(RulesEngine):
    """Adapter exposing the rules-engine capability over a `chess.Board`."""

    def __init__(self, fen: Optional[FEN] = None, default_promotion: PieceKind = "q"):
        self._default_promotion = chess.Piece.from_symbol(default_promotion).piece_type
        self._board = chess.Board()
        self.reset(fen)

    def reset(self, fen: Optional[FEN] = None) -> None:
        """Discards all history and loads the standard layout, or `fen` if given."""
        if fen is None:
            self._board = chess.Board()
            return
        try:
            board = chess.Board(fen)
        except ValueError as e:
            raise InvalidPositionError(f"Invalid FEN: {fen!r}") from e
        if not board.is_valid():
            raise InvalidPositionError(f"FEN describes an impossible position: {fen!r}")
        self._board = board

    # --- Queries ---

    def piece_at(self, square: SquareId) -> Optional[Tuple[Side, PieceKind]]:
        piece = self._board.piece_at(_parse_square(square))
        if piece is None:
            return None
        return _side_of(piece.color), chess.piece_symbol(piece.piece_type)

    def legal_destinations(self, square: SquareId) -> FrozenSet[SquareId]:
        from_square = _parse_square(square)
        return frozenset(
            chess.square_name(move.to_square)
            for move in self._board.legal_moves
            if move.from_square == from_square
        )

    def serialize_position(self) -> FEN:
        return self._board.fen()

    def side_to_move(self) -> Side:
        return _side_of(self._board.turn)

    def in_check(self) -> bool:
        return self._board.is_check()

    def is_checkmate(self) -> bool:
        return self._board.is_checkmate()

    def draw_conditions(self) -> DrawConditions:
        board = self._board
        return DrawConditions(
            stalemate=board.is_stalemate(),
            insufficient_material=board.is_insufficient_material(),
            # Repetition and the 50-move rule count as soon as they occur, without a claim.
            repetition=board.is_repetition(3),
            fifty_moves=board.halfmove_clock >= 100,
        )

    def verbose_history(self) -> List[AppliedMove]:
        """Replays the move stack from the root position to describe every move."""
        replay = self._board.root()
        history: List[AppliedMove] = []
        for move in self._board.move_stack:
            history.append(describe_move(replay, move))
            replay.push(move)
        return history

    def san_history(self) -> List[str]:
        return [applied.san for applied in self.verbose_history()]

    # --- Mutations ---

    def _build_move(self, origin: SquareId, destination: SquareId, promotion: Optional[PieceKind]) -> chess.Move:
        from_square = _parse_square(origin)
        to_square = _parse_square(destination)
        piece = self._board.piece_at(from_square)
        if piece is None:
            raise IllegalMoveError(f"No piece on {origin}.", origin, destination)
        if piece.color != self._board.turn:
            raise IllegalMoveError(f"It is not {_side_of(piece.color).display_name}'s turn.", origin, destination)

        # The promotion piece is a hint; it only applies to a pawn reaching the last rank.
        if piece.piece_type != chess.PAWN or chess.square_rank(to_square) not in (0, 7):
            return chess.Move(from_square, to_square)

        promotion_type = self._default_promotion
        if promotion:
            try:
                promotion_type = chess.Piece.from_symbol(promotion.lower()).piece_type
            except ValueError as e:
                raise IllegalMoveError(f"Unknown promotion piece: {promotion!r}", origin, destination) from e
        return chess.Move(from_square, to_square, promotion=promotion_type)

    def apply_move(self, origin: SquareId, destination: SquareId, promotion: Optional[PieceKind] = None) -> MoveOutcome:
        """
        Validates and plays a move on the authoritative board.

        Raises:
            IllegalMoveError: If the move is malformed or not legal in the current position.
        """
        move = self._build_move(origin, destination, promotion)
        if not self._board.is_legal(move):
            raise IllegalMoveError(f"Illegal move {origin}{destination}.", origin, destination)

        applied = describe_move(self._board, move)
        self._board.push(move)
        outcome = MoveOutcome(
            move=applied,
            is_check=self._board.is_check(),
            is_checkmate=self._board.is_checkmate(),
            draw=self.draw_conditions(),
        )
        logger.debug("Move applied.", san=applied.san, fen=self._board.fen())
        return outcome

    def undo(self) -> bool:
        if not self._board.move_stack:
            return False
        self._board.pop()
        return True
