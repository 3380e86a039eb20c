# chess_coach/types.py
"""
A central module for shared data structures and service interfaces (Protocols).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import (Callable, FrozenSet, List, Optional, Protocol, Tuple,
                    TypeAlias, runtime_checkable)

FEN: TypeAlias = str
SquareId: TypeAlias = str
PieceKind: TypeAlias = str  # Lowercase piece symbol: 'p', 'n', 'b', 'r', 'q', 'k'


class Side(str, Enum):
    WHITE = "w"; BLACK = "b"

    @property
    def opponent(self) -> "Side":
        return Side.BLACK if self is Side.WHITE else Side.WHITE

    @property
    def display_name(self) -> str:
        return "White" if self is Side.WHITE else "Black"


class Winner(str, Enum):
    WHITE = "w"; BLACK = "b"; DRAW = "draw"

    @classmethod
    def from_side(cls, side: Side) -> "Winner":
        return cls(side.value)


class FeedbackEvent(str, Enum):
    """The audio/visual cue played after a state-changing operation."""
    MOVE = "move"; CAPTURE = "capture"; CHECK = "check"
    START = "start"; END = "end"


# --- DATA CONTRACTS ---

@dataclass(frozen=True, slots=True)
class AppliedMove:
    """One committed move, as recorded in the game history."""
    origin: SquareId
    destination: SquareId
    piece: PieceKind
    side: Side
    san: str
    promotion: Optional[PieceKind] = None
    captured: Optional[PieceKind] = None

    @property
    def is_capture(self) -> bool:
        return self.captured is not None


@dataclass(frozen=True, slots=True)
class DrawConditions:
    stalemate: bool = False
    insufficient_material: bool = False
    repetition: bool = False
    fifty_moves: bool = False

    @property
    def any(self) -> bool:
        return self.stalemate or self.insufficient_material or self.repetition or self.fifty_moves


@dataclass(frozen=True, slots=True)
class MoveOutcome:
    """The rules engine's verdict on a successfully applied move."""
    move: AppliedMove
    is_check: bool
    is_checkmate: bool
    draw: DrawConditions = field(default_factory=DrawConditions)

    @property
    def is_draw(self) -> bool:
        # Checkmate takes precedence over a draw condition reached on the same move.
        return not self.is_checkmate and self.draw.any

    @property
    def is_game_over(self) -> bool:
        return self.is_checkmate or self.is_draw


@dataclass(frozen=True, slots=True)
class CapturedPieces:
    """
    Captured piece kinds grouped by the colour of the captured piece.

    `white` holds white pieces taken by black, `black` holds black pieces
    taken by white.
    """
    white: Tuple[PieceKind, ...] = ()
    black: Tuple[PieceKind, ...] = ()

    def for_side(self, side: Side) -> Tuple[PieceKind, ...]:
        return self.white if side is Side.WHITE else self.black


@dataclass(frozen=True)
class GameSnapshot:
    fen: FEN
    turn: Side
    is_check: bool
    is_checkmate: bool
    is_draw: bool
    winner: Optional[Winner]
    history: Tuple[AppliedMove, ...]
    captured: CapturedPieces

    @property
    def is_terminal(self) -> bool:
        return self.is_checkmate or self.is_draw

    @property
    def last_move(self) -> Optional[AppliedMove]:
        return self.history[-1] if self.history else None

    @property
    def move_count(self) -> int:
        return len(self.history)


@dataclass(frozen=True, slots=True)
class InteractionState:
    selected_square: Optional[SquareId] = None
    legal_destinations: FrozenSet[SquareId] = frozenset()

    @classmethod
    def idle(cls) -> "InteractionState":
        return cls()

    @property
    def is_idle(self) -> bool:
        return self.selected_square is None


@dataclass(frozen=True, slots=True)
class AdvisoryRequest:
    """Binds a coach request to the position it was issued for."""
    request_id: int
    position_version: int
    fen: FEN
    moves: Tuple[str, ...]


# --- PROTOCOLS: Abstract Interfaces for Services ---
# These define the "contracts" that concrete service implementations must adhere to.
# They enable dependency inversion and allow for easy mocking in tests.

@runtime_checkable
class RulesEngine(Protocol):
    """Defines the abstract interface for the authoritative chess position."""
    def legal_destinations(self, square: SquareId) -> FrozenSet[SquareId]: ...
    def piece_at(self, square: SquareId) -> Optional[Tuple[Side, PieceKind]]: ...
    def apply_move(self, origin: SquareId, destination: SquareId, promotion: Optional[PieceKind] = None) -> MoveOutcome: ...
    def undo(self) -> bool: ...
    def reset(self, fen: Optional[FEN] = None) -> None: ...
    def serialize_position(self) -> FEN: ...
    def verbose_history(self) -> List[AppliedMove]: ...
    def san_history(self) -> List[str]: ...
    def side_to_move(self) -> Side: ...
    def in_check(self) -> bool: ...
    def is_checkmate(self) -> bool: ...
    def draw_conditions(self) -> DrawConditions: ...


@runtime_checkable
class AdvisoryService(Protocol):
    """Defines the abstract interface for the AI coach."""
    async def analyze(self, fen: FEN, moves: List[str]) -> str: ...


class Playable(Protocol):
    """Anything that can play a short sound cue."""
    def play(self) -> None: ...


FeedbackSink: TypeAlias = Callable[[FeedbackEvent], None]
StateCallback: TypeAlias = Callable[[], None]
