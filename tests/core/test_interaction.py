# tests/core/test_interaction.py
import pytest

from chess_coach.core.interaction import (AttemptMove, Deselect, Ignore, Select,
                                          next_click_action)
from chess_coach.core.snapshot_builder import build_snapshot
from chess_coach.services.rules_engine import PythonChessRulesEngine
from chess_coach.types import InteractionState


@pytest.fixture
def engine():
    return PythonChessRulesEngine()

@pytest.fixture
def snapshot(engine):
    return build_snapshot(engine)

def selected(square, *destinations):
    return InteractionState(selected_square=square, legal_destinations=frozenset(destinations))


def test_idle_click_on_own_piece_selects_it(engine, snapshot):
    action = next_click_action(InteractionState.idle(), "e2", snapshot, engine)

    assert action == Select("e2", frozenset({"e3", "e4"}))
    assert action.to_state() == selected("e2", "e3", "e4")

def test_idle_click_on_empty_square_is_ignored(engine, snapshot):
    assert next_click_action(InteractionState.idle(), "e4", snapshot, engine) == Ignore()

def test_idle_click_on_opponent_piece_is_ignored(engine, snapshot):
    assert next_click_action(InteractionState.idle(), "e7", snapshot, engine) == Ignore()

def test_clicking_the_selected_square_deselects(engine, snapshot):
    assert next_click_action(selected("e2", "e3", "e4"), "e2", snapshot, engine) == Deselect()

def test_clicking_a_legal_destination_attempts_the_move(engine, snapshot):
    action = next_click_action(selected("e2", "e3", "e4"), "e4", snapshot, engine)
    assert action == AttemptMove("e2", "e4")

def test_clicking_another_friendly_piece_reselects(engine, snapshot):
    action = next_click_action(selected("e2", "e3", "e4"), "g1", snapshot, engine)
    assert action == Select("g1", frozenset({"f3", "h3"}))

def test_clicking_elsewhere_deselects(engine, snapshot):
    assert next_click_action(selected("e2", "e3", "e4"), "e5", snapshot, engine) == Deselect()
    assert next_click_action(selected("e2", "e3", "e4"), "d7", snapshot, engine) == Deselect()

def test_terminal_game_ignores_every_click():
    engine = PythonChessRulesEngine()
    for uci in ("f2f3", "e7e5", "g2g4", "d8h4"):
        engine.apply_move(uci[:2], uci[2:])
    snapshot = build_snapshot(engine)

    assert next_click_action(InteractionState.idle(), "a2", snapshot, engine) == Ignore()
    assert next_click_action(selected("a2", "a3"), "a2", snapshot, engine) == Ignore()
    assert next_click_action(selected("a2", "a3"), "a3", snapshot, engine) == Ignore()
