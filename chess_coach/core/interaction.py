# chess_coach/core/interaction.py
"""
The square-click state machine.

The board has two interaction states: `Idle` (no selection) and
`Selected(square)`. `next_click_action` is a pure transition function: it
inspects the current `InteractionState`, the clicked square and the game
snapshot, and returns the `ClickAction` the orchestrator should carry out.
Keeping the decision separate from its execution lets the orchestrator own
every mutation while the transitions stay trivially testable.
"""
from dataclasses import dataclass
from typing import FrozenSet, Union

from chess_coach.types import GameSnapshot, InteractionState, RulesEngine, SquareId


@dataclass(frozen=True, slots=True)
class Ignore:
    """Leave the interaction state as it is."""


@dataclass(frozen=True, slots=True)
class Select:
    square: SquareId
    destinations: FrozenSet[SquareId]

    def to_state(self) -> InteractionState:
        return InteractionState(selected_square=self.square, legal_destinations=self.destinations)


@dataclass(frozen=True, slots=True)
class Deselect:
    """Return to `Idle`."""


@dataclass(frozen=True, slots=True)
class AttemptMove:
    origin: SquareId
    destination: SquareId


ClickAction = Union[Ignore, Select, Deselect, AttemptMove]


def _select_if_friendly(square: SquareId, snapshot: GameSnapshot, engine: RulesEngine) -> Union[Select, None]:
    occupant = engine.piece_at(square)
    if occupant is None or occupant[0] is not snapshot.turn:
        return None
    return Select(square, engine.legal_destinations(square))


def next_click_action(
    state: InteractionState, square: SquareId, snapshot: GameSnapshot, engine: RulesEngine
) -> ClickAction:
    """
    Decides what a click on `square` does.

    Args:
        state: The current selection.
        square: The clicked square, e.g. "e2".
        snapshot: The current game snapshot; a terminal game ignores all clicks.
        engine: Used to look up the clicked piece and its legal destinations.

    Returns:
        The action to carry out.
    """
    if snapshot.is_terminal:
        return Ignore()

    if state.is_idle:
        return _select_if_friendly(square, snapshot, engine) or Ignore()

    if square == state.selected_square:
        return Deselect()
    if square in state.legal_destinations:
        return AttemptMove(state.selected_square, square)
    return _select_if_friendly(square, snapshot, engine) or Deselect()
