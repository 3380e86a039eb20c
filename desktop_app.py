# desktop_app.py
"""
The main window and Presenter for the Chess Coach Desktop application.
"""

from typing import Mapping, Optional

import structlog
from PySide6.QtCore import QTimer, Slot
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QHBoxLayout, QMainWindow, QMessageBox, QToolBar, QWidget

from app_controller import AppController
from chess_coach.config.settings import settings
from chess_coach.containers import get_container
from chess_coach.core.presentation import game_over_text
from chess_coach.types import FeedbackEvent, GameSnapshot, Playable
from chess_coach.utils.qt_logging import QLogEmitter
from state.app_state import AppState
from views.board_view import BoardView
from views.game_panel_view import GamePanelView


logger = structlog.get_logger(__name__)


class MainWindow(QMainWindow):
    """The main application window, acting as a container and presenter."""

    def __init__(
        self,
        log_emitter: QLogEmitter,
        sound_registry: Optional[Mapping[FeedbackEvent, Playable]] = None,
        parent: QWidget | None = None,
    ):
        super().__init__(parent)
        self.setWindowTitle("Chess Coach")

        self.log_emitter = log_emitter
        self._announced_game_over = False

        self.container = get_container(settings, sound_registry)
        self.app_state = AppState()

        self._create_toolbar()
        self.board_view = BoardView(settings.board)
        self.game_panel_view = GamePanelView()

        main_container = QWidget()
        central_layout = QHBoxLayout(main_container)
        central_layout.addWidget(self.board_view, stretch=2)
        central_layout.addWidget(self.game_panel_view, stretch=1)
        self.setCentralWidget(main_container)

        # --- Connect state signals BEFORE the controller publishes its first snapshot ---
        self._setup_connections()
        self.controller = AppController(self.app_state, self.container)
        self._connect_controller()

        logger.info("Application initialized.", show_in_gui=True)

    def _create_toolbar(self):
        toolbar = QToolBar("Main Toolbar")
        self.addToolBar(toolbar)

        self.action_new_game = QAction("New Game", self)
        self.action_new_game.setShortcut(QKeySequence.StandardKey.New)
        toolbar.addAction(self.action_new_game)

        self.action_undo = QAction("Undo", self)
        self.action_undo.setShortcut(QKeySequence.StandardKey.Undo)
        toolbar.addAction(self.action_undo)

        self.action_analyze = QAction("Analyze", self)
        toolbar.addAction(self.action_analyze)

    def _setup_connections(self):
        """Connect state signals to the views."""
        state = self.app_state
        state.snapshot_changed.connect(self.board_view.show_snapshot)
        state.snapshot_changed.connect(self.game_panel_view.show_snapshot)
        state.snapshot_changed.connect(self._on_snapshot_changed)
        state.interaction_changed.connect(self.board_view.show_interaction)
        state.advisory_changed.connect(self.game_panel_view.show_advisory)
        state.analyzing_changed.connect(self.game_panel_view.set_analyzing)
        state.analyzing_changed.connect(lambda busy: self.action_analyze.setEnabled(not busy))
        state.muted_changed.connect(self.game_panel_view.set_muted)

        # --- Logging ---
        self.log_emitter.log_generated.connect(lambda message: self.statusBar().showMessage(message, 5000))

    def _connect_controller(self):
        """Connect view actions to the controller."""
        controller = self.controller
        self.board_view.square_clicked.connect(controller.handle_square_click)

        panel = self.game_panel_view
        panel.undo_requested.connect(controller.undo)
        panel.analyze_requested.connect(controller.request_analysis)
        panel.mute_toggled.connect(controller.toggle_mute)
        panel.new_game_requested.connect(controller.new_game)

        self.action_new_game.triggered.connect(controller.new_game)
        self.action_undo.triggered.connect(controller.undo)
        self.action_analyze.triggered.connect(controller.request_analysis)

    @Slot(object)
    def _on_snapshot_changed(self, snapshot: GameSnapshot):
        """Offers a new game once, when the game has just ended."""
        headline = game_over_text(snapshot)
        if headline is None:
            self._announced_game_over = False
            return
        if self._announced_game_over:
            return
        self._announced_game_over = True
        # Let the move that ended the game finish before the modal dialog opens.
        QTimer.singleShot(0, lambda: self._show_game_over_dialog(headline))

    def _show_game_over_dialog(self, headline: str):
        msg_box = QMessageBox(self)
        msg_box.setIcon(QMessageBox.Icon.Information)
        msg_box.setWindowTitle("Game Over")
        msg_box.setText(headline)
        play_again = msg_box.addButton("Play Again", QMessageBox.ButtonRole.AcceptRole)
        msg_box.addButton(QMessageBox.StandardButton.Close)
        msg_box.exec()
        if msg_box.clickedButton() is play_again:
            self.controller.new_game()

    def closeEvent(self, event):
        logger.info("Close event received. Shutting down services...")
        self.controller.shutdown_workers()
        super().closeEvent(event)
