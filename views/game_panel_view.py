# views/game_panel_view.py
"""
Defines the side panel: game status, captured pieces, move list, coach
commentary and the game controls.
"""
from typing import Optional

from PySide6.QtCore import Qt, Signal, Slot
from PySide6.QtWidgets import (QGroupBox, QHBoxLayout, QLabel, QListWidget,
                               QPushButton, QVBoxLayout, QWidget)

from chess_coach.core.presentation import captured_text, move_rows, status_text
from chess_coach.types import GameSnapshot, Side


class GamePanelView(QWidget):
    """The UI for the 'Game' side panel."""
    undo_requested = Signal()
    analyze_requested = Signal()
    mute_toggled = Signal()
    new_game_requested = Signal()

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self._create_widgets()
        self._configure_widgets()
        self._create_layout()
        self._connect_signals()

    def _create_widgets(self):
        """Instantiate all UI widgets."""
        self.status_label = QLabel()
        self.black_captured_label = QLabel()
        self.white_captured_label = QLabel()
        self.move_list = QListWidget()
        self.empty_history_label = QLabel("No moves yet")
        self.coach_label = QLabel()

        self.undo_button = QPushButton("Undo")
        self.analyze_button = QPushButton("Analyze")
        self.mute_button = QPushButton("Mute")
        self.new_game_button = QPushButton("New Game")

    def _configure_widgets(self):
        """Set initial properties and styles for widgets."""
        self.status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.status_label.setStyleSheet("font-size: 16px; font-weight: bold;")
        for label in (self.black_captured_label, self.white_captured_label):
            label.setStyleSheet("font-size: 20px;")
        self.empty_history_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.move_list.setSelectionMode(QListWidget.SelectionMode.NoSelection)

        self.coach_label.setWordWrap(True)
        self.coach_label.setStyleSheet("font-style: italic;")
        self.coach_group = QGroupBox("Coach Analysis")
        self.coach_group.setVisible(False)

    def _create_layout(self):
        """Arrange all widgets in a single, logical layout."""
        main_layout = QVBoxLayout(self)
        main_layout.addWidget(self.status_label)

        captured_group = QGroupBox("Captured")
        captured_layout = QVBoxLayout(captured_group)
        captured_layout.addWidget(self.black_captured_label)
        captured_layout.addWidget(self.white_captured_label)
        main_layout.addWidget(captured_group)

        history_group = QGroupBox("Moves")
        history_layout = QVBoxLayout(history_group)
        history_layout.addWidget(self.move_list)
        history_layout.addWidget(self.empty_history_label)
        main_layout.addWidget(history_group, stretch=1)

        coach_layout = QVBoxLayout(self.coach_group)
        coach_layout.addWidget(self.coach_label)
        main_layout.addWidget(self.coach_group)

        top_row = QHBoxLayout()
        top_row.addWidget(self.undo_button)
        top_row.addWidget(self.analyze_button, stretch=2)
        bottom_row = QHBoxLayout()
        bottom_row.addWidget(self.mute_button)
        bottom_row.addWidget(self.new_game_button, stretch=1)
        main_layout.addLayout(top_row)
        main_layout.addLayout(bottom_row)

    def _connect_signals(self):
        self.undo_button.clicked.connect(self.undo_requested.emit)
        self.analyze_button.clicked.connect(self.analyze_requested.emit)
        self.mute_button.clicked.connect(self.mute_toggled.emit)
        self.new_game_button.clicked.connect(self.new_game_requested.emit)

    @Slot(object)
    def show_snapshot(self, snapshot: GameSnapshot):
        self.status_label.setText(status_text(snapshot))
        # Black pieces taken by white are shown on white's side, and vice versa.
        self.white_captured_label.setText(f"White: {captured_text(snapshot.captured, Side.BLACK)}")
        self.black_captured_label.setText(f"Black: {captured_text(snapshot.captured, Side.WHITE)}")

        self.move_list.clear()
        for number, white_san, black_san in move_rows(snapshot.history):
            self.move_list.addItem(f"{number}.  {white_san:<8} {black_san}")
        self.move_list.scrollToBottom()
        self.empty_history_label.setVisible(not snapshot.history)
        self.undo_button.setEnabled(bool(snapshot.history))

    @Slot(object)
    def show_advisory(self, text: Optional[str]):
        self.coach_label.setText(f"“{text}”" if text else "")
        self.coach_group.setVisible(bool(text))

    @Slot(bool)
    def set_analyzing(self, is_analyzing: bool):
        self.analyze_button.setEnabled(not is_analyzing)
        self.analyze_button.setText("Thinking..." if is_analyzing else "Analyze")

    @Slot(bool)
    def set_muted(self, is_muted: bool):
        self.mute_button.setText("Unmute" if is_muted else "Mute")
