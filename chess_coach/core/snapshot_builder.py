# chess_coach/core/snapshot_builder.py
"""
Composes rules-engine queries into one immutable, renderable `GameSnapshot`.

The snapshot is a pure function of the engine's current position and history.
It is rebuilt after every state change and never patched in place.
"""
from typing import Optional

import structlog

from chess_coach.core.capture_aggregator import derive_captures
from chess_coach.types import GameSnapshot, RulesEngine, Side, Winner

logger = structlog.get_logger(__name__)


def determine_winner(turn: Side, is_checkmate: bool, is_draw: bool) -> Optional[Winner]:
    """
    Checkmate is detected after the mating move, so the side to move has lost.
    """
    if is_checkmate:
        return Winner.from_side(turn.opponent)
    if is_draw:
        return Winner.DRAW
    return None


def build_snapshot(engine: RulesEngine) -> GameSnapshot:
    turn = engine.side_to_move()
    is_checkmate = engine.is_checkmate()
    is_draw = not is_checkmate and engine.draw_conditions().any
    history = tuple(engine.verbose_history())

    snapshot = GameSnapshot(
        fen=engine.serialize_position(),
        turn=turn,
        is_check=engine.in_check(),
        is_checkmate=is_checkmate,
        is_draw=is_draw,
        winner=determine_winner(turn, is_checkmate, is_draw),
        history=history,
        captured=derive_captures(history),
    )
    logger.debug("Snapshot rebuilt.", fen=snapshot.fen, moves=snapshot.move_count, winner=snapshot.winner)
    return snapshot
