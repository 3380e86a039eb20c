# app_controller.py
"""
Contains the main application logic controller and the background coach worker.
"""

import asyncio
from typing import Optional

import punq
from PySide6.QtCore import QObject, QThread, Signal, Slot
import structlog

from chess_coach.config.settings import Settings
from chess_coach.orchestration.orchestrator import MoveOrchestrator
from chess_coach.services.audio_service import AudioService
from chess_coach.types import AdvisoryRequest, AdvisoryService, FeedbackEvent
from state.app_state import AppState

logger = structlog.get_logger(__name__)


class AdvisoryWorker(QObject):
    """
    Runs coach requests on a private asyncio event loop in its own thread.

    Requests are submitted from the GUI thread with `submit`; each answer is
    delivered back through the `finished` signal together with the request it
    belongs to, so the receiver can tell whether it is still current.
    """
    finished = Signal(object, str)  # Emits (AdvisoryRequest, text)

    def __init__(self, service: AdvisoryService, fallback_message: str, parent=None):
        super().__init__(parent)
        self._service = service
        self._fallback_message = fallback_message
        self._loop = asyncio.new_event_loop()

    def run(self):
        asyncio.set_event_loop(self._loop)
        try:
            self._loop.run_forever()
        finally:
            pending = asyncio.all_tasks(self._loop)
            for task in pending:
                task.cancel()
            self._loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            self._loop.close()
            logger.debug("Advisory worker event loop closed.")

    def submit(self, request: AdvisoryRequest):
        """Schedules `request` on the worker loop. Safe to call from any thread."""
        asyncio.run_coroutine_threadsafe(self._analyze(request), self._loop)

    async def _analyze(self, request: AdvisoryRequest):
        logger.debug("AdvisoryWorker processing request.", request_id=request.request_id)
        try:
            text = await self._service.analyze(request.fen, list(request.moves))
        except Exception:
            # The service contract is to never raise; keep the indicator from sticking regardless.
            logger.error("Advisory service raised unexpectedly", exc_info=True)
            text = self._fallback_message
        self.finished.emit(request, text)

    def stop(self):
        if not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._loop.stop)


class AppController(QObject):
    """Routes user gestures to the orchestrator and plays feedback sounds."""

    def __init__(self, app_state: AppState, container: punq.Container, parent=None):
        super().__init__(parent)
        self._app_state = app_state
        self._settings: Settings = container.resolve(Settings)
        self._audio: AudioService = container.resolve(AudioService)
        self._orchestrator: MoveOrchestrator = container.resolve(MoveOrchestrator)
        self._orchestrator.set_listeners(self._on_feedback, self._sync_state)

        self.advisory_thread: Optional[QThread] = QThread()
        self.advisory_worker = AdvisoryWorker(
            container.resolve(AdvisoryService), self._settings.advisory.unavailable_message
        )
        self.advisory_worker.moveToThread(self.advisory_thread)
        self.advisory_thread.started.connect(self.advisory_worker.run)
        self.advisory_worker.finished.connect(self._on_advisory_finished)
        self.advisory_thread.start()

        self._app_state.set_muted(self._audio.muted)
        self._sync_state()

    @property
    def orchestrator(self) -> MoveOrchestrator:
        return self._orchestrator

    def _sync_state(self):
        self._app_state.sync_from(self._orchestrator)

    def _on_feedback(self, event: FeedbackEvent):
        self._audio.play(event)

    # --- Public slots for the presenter ---

    @Slot(str)
    def handle_square_click(self, square: str):
        self._orchestrator.click_square(square)

    @Slot()
    def new_game(self):
        self._orchestrator.reset_game()

    @Slot()
    def undo(self):
        self._orchestrator.undo_last_move()

    @Slot()
    def toggle_mute(self):
        muted = self._audio.toggle_mute()
        logger.info("Sound muted." if muted else "Sound unmuted.", show_in_gui=True)
        self._app_state.set_muted(muted)

    @Slot()
    def request_analysis(self):
        request = self._orchestrator.begin_advisory()
        if request is None:
            return
        logger.debug("Submitting coach request to worker.", request_id=request.request_id)
        self.advisory_worker.submit(request)

    @Slot(object, str)
    def _on_advisory_finished(self, request: AdvisoryRequest, text: str):
        applied = self._orchestrator.complete_advisory(request, text)
        logger.debug("Coach answer received.", request_id=request.request_id, applied=applied)

    def shutdown_workers(self):
        logger.info("Controller shutting down workers.")
        if self.advisory_worker:
            self.advisory_worker.stop()
        if self.advisory_thread and self.advisory_thread.isRunning():
            self.advisory_thread.quit()
            self.advisory_thread.wait(2000)
