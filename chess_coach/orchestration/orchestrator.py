# chess_coach/orchestration/orchestrator.py
"""
The top-level game controller.

`MoveOrchestrator` is the single owner of all mutable game state: the
rules-engine position, the derived `GameSnapshot`, the board selection and the
coach's advisory text. Every user gesture goes through it, and every change of
position follows the same sequence:

    mutate engine -> rebuild snapshot -> reset selection -> clear advisory
    -> emit one feedback event -> notify listeners

It has no Qt dependencies; `AppController` wraps it for the GUI.
"""
from typing import Optional

import structlog

from chess_coach.core.feedback_classifier import classify_feedback
from chess_coach.core.interaction import (AttemptMove, Deselect, Select,
                                          next_click_action)
from chess_coach.core.snapshot_builder import build_snapshot
from chess_coach.exceptions import IllegalMoveError
from chess_coach.types import (AdvisoryRequest, AppliedMove, FeedbackEvent,
                               FeedbackSink, GameSnapshot, InteractionState,
                               PieceKind, RulesEngine, SquareId, StateCallback)
from chess_coach.utils import metrics

logger = structlog.get_logger(__name__)


class MoveOrchestrator:
    def __init__(
        self,
        engine: RulesEngine,
        feedback_sink: Optional[FeedbackSink] = None,
        state_callback: Optional[StateCallback] = None,
    ):
        """
        Args:
            engine: The rules engine holding the authoritative position.
            feedback_sink: Receives exactly one event per move, undo or reset.
            state_callback: Called after every change of observable state.
        """
        self._engine = engine
        self._feedback_sink = feedback_sink
        self._state_callback = state_callback

        self._snapshot: GameSnapshot = build_snapshot(engine)
        self._interaction = InteractionState.idle()
        self._advisory_text: Optional[str] = None
        self._position_version = 0
        self._next_request_id = 1
        self._pending_request: Optional[AdvisoryRequest] = None

    def set_listeners(
        self, feedback_sink: Optional[FeedbackSink], state_callback: Optional[StateCallback]
    ) -> None:
        """Replaces the feedback sink and state callback."""
        self._feedback_sink = feedback_sink
        self._state_callback = state_callback

    # --- Read-only state ---

    @property
    def snapshot(self) -> GameSnapshot:
        return self._snapshot

    @property
    def interaction(self) -> InteractionState:
        return self._interaction

    @property
    def advisory_text(self) -> Optional[str]:
        return self._advisory_text

    @property
    def is_analyzing(self) -> bool:
        return self._pending_request is not None

    @property
    def position_version(self) -> int:
        """Incremented on every change of position; advisory requests are bound to it."""
        return self._position_version

    # --- Internal helpers ---

    def _notify(self) -> None:
        if self._state_callback:
            self._state_callback()

    def _emit(self, event: FeedbackEvent) -> None:
        metrics.FEEDBACK_EVENTS_TOTAL.labels(event=event.value).inc()
        if self._feedback_sink:
            self._feedback_sink(event)

    def _on_position_changed(self, event: FeedbackEvent) -> None:
        self._position_version += 1
        self._snapshot = build_snapshot(self._engine)
        self._interaction = InteractionState.idle()
        self._advisory_text = None
        # A request for the previous position can no longer be shown.
        self._pending_request = None
        self._emit(event)
        self._notify()

    # --- Board operations ---

    def attempt_move(
        self, origin: SquareId, destination: SquareId, promotion: Optional[PieceKind] = None
    ) -> Optional[AppliedMove]:
        """
        Validates and applies a move.

        Returns:
            The applied move, or None if the move was rejected. A rejected
            move changes nothing and emits no event.
        """
        if self._snapshot.is_terminal:
            logger.debug("Move ignored, the game is over.", origin=origin, destination=destination)
            metrics.MOVES_REJECTED_TOTAL.labels(reason="game_over").inc()
            return None

        try:
            outcome = self._engine.apply_move(origin, destination, promotion)
        except IllegalMoveError as e:
            logger.debug("Move rejected.", origin=origin, destination=destination, reason=str(e))
            metrics.MOVES_REJECTED_TOTAL.labels(reason="illegal").inc()
            return None

        metrics.MOVES_APPLIED_TOTAL.inc()
        logger.info("Move played.", san=outcome.move.san, side=outcome.move.side.value)
        self._on_position_changed(classify_feedback(outcome))
        if self._snapshot.is_terminal:
            logger.info("Game over.", winner=self._snapshot.winner.value, show_in_gui=True)
        return outcome.move

    def undo_last_move(self) -> bool:
        """
        Takes back the most recent move.

        Undo always emits the neutral `MOVE` event, whatever the undone move
        had been. Returns False, changing nothing, when there is no history.
        """
        if not self._engine.undo():
            logger.debug("Undo ignored, no moves to take back.")
            return False
        logger.info("Move taken back.", moves=len(self._snapshot.history) - 1)
        self._on_position_changed(FeedbackEvent.MOVE)
        return True

    def reset_game(self) -> None:
        """Discards all history and starts again from the standard layout."""
        self._engine.reset()
        logger.info("New game started.", show_in_gui=True)
        self._on_position_changed(FeedbackEvent.START)

    def click_square(self, square: SquareId) -> Optional[AppliedMove]:
        """
        Feeds a square click through the interaction state machine.

        Returns:
            The applied move if the click completed one, else None.
        """
        try:
            action = next_click_action(self._interaction, square, self._snapshot, self._engine)
        except IllegalMoveError:
            logger.warning("Click on an unknown square ignored.", square=square)
            return None

        if isinstance(action, Select):
            self._interaction = action.to_state()
            self._notify()
        elif isinstance(action, Deselect):
            self._interaction = InteractionState.idle()
            self._notify()
        elif isinstance(action, AttemptMove):
            # On rejection the selection is kept as it was.
            return self.attempt_move(action.origin, action.destination)
        return None

    # --- Advisory requests ---

    def begin_advisory(self) -> Optional[AdvisoryRequest]:
        """
        Issues a coach request bound to the current position.

        Returns:
            The request to run, or None if one for this position is already
            outstanding.
        """
        pending = self._pending_request
        if pending is not None:
            logger.debug("Advisory already in progress.", request_id=pending.request_id)
            return None

        request = AdvisoryRequest(
            request_id=self._next_request_id,
            position_version=self._position_version,
            fen=self._snapshot.fen,
            moves=tuple(self._engine.san_history()),
        )
        self._next_request_id += 1
        self._pending_request = request
        logger.info("Coach analysis requested.", request_id=request.request_id, show_in_gui=True)
        self._notify()
        return request

    def complete_advisory(self, request: AdvisoryRequest, text: str) -> bool:
        """
        Delivers the coach's answer for `request`.

        The text is shown only if `request` is still the pending one and the
        position has not changed since. Any change of position drops the
        pending request, so stale answers are discarded silently.

        Returns:
            True if the text was applied.
        """
        pending = self._pending_request
        if (pending is None or request.request_id != pending.request_id
                or request.position_version != self._position_version):
            logger.debug("Stale advisory result discarded.", request_id=request.request_id)
            metrics.ADVISORY_REQUESTS_TOTAL.labels(outcome="stale").inc()
            return False

        self._pending_request = None
        self._advisory_text = text
        self._notify()
        return True
