# state/app_state.py
"""
Defines the central state model for the application.
"""
from typing import Optional

from PySide6.QtCore import QObject, Signal
import structlog

from chess_coach.orchestration.orchestrator import MoveOrchestrator
from chess_coach.types import GameSnapshot, InteractionState


class AppState(QObject):
    """
    The Qt-facing mirror of the orchestrator's state.

    Views never read the orchestrator directly; they connect to these signals.
    `sync_from` copies the orchestrator's state and emits only for the parts
    that actually changed.
    """

    logger = structlog.get_logger()

    snapshot_changed = Signal(object)     # Emits GameSnapshot
    interaction_changed = Signal(object)  # Emits InteractionState
    advisory_changed = Signal(object)     # Emits Optional[str]
    analyzing_changed = Signal(bool)
    muted_changed = Signal(bool)

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._snapshot: Optional[GameSnapshot] = None
        self._interaction = InteractionState.idle()
        self._advisory_text: Optional[str] = None
        self._is_analyzing = False
        self._is_muted = False

    def sync_from(self, orchestrator: MoveOrchestrator):
        if orchestrator.snapshot != self._snapshot:
            self._snapshot = orchestrator.snapshot
            self.logger.debug("AppState snapshot updated", moves=self._snapshot.move_count)
            self.snapshot_changed.emit(self._snapshot)
        if orchestrator.interaction != self._interaction:
            self._interaction = orchestrator.interaction
            self.interaction_changed.emit(self._interaction)
        if orchestrator.advisory_text != self._advisory_text:
            self._advisory_text = orchestrator.advisory_text
            self.advisory_changed.emit(self._advisory_text)
        if orchestrator.is_analyzing != self._is_analyzing:
            self._is_analyzing = orchestrator.is_analyzing
            self.analyzing_changed.emit(self._is_analyzing)

    def set_muted(self, muted: bool):
        if muted != self._is_muted:
            self._is_muted = muted
            self.muted_changed.emit(muted)

