# views/board_view.py
"""
Defines the interactive board, rendered as SVG by `chess.svg`.
"""
from typing import Dict, Optional

import chess
import chess.svg
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QMouseEvent
from PySide6.QtSvgWidgets import QSvgWidget
from PySide6.QtWidgets import QVBoxLayout, QWidget
import structlog

from chess_coach.config.settings import BoardSettings
from chess_coach.core.presentation import Highlight, highlighted_squares
from chess_coach.types import GameSnapshot, InteractionState


class ClickableSvgWidget(QSvgWidget):
    """An SVG widget that reports which of the 64 squares was clicked."""
    square_clicked = Signal(str)

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() != Qt.MouseButton.LeftButton:
            return super().mousePressEvent(event)
        pos = event.position()
        file_index = int(pos.x() * 8 / max(1, self.width()))
        rank_index = 7 - int(pos.y() * 8 / max(1, self.height()))
        if 0 <= file_index < 8 and 0 <= rank_index < 8:
            self.square_clicked.emit(chess.square_name(chess.square(file_index, rank_index)))


class BoardView(QWidget):
    """Draws the current position with selection, legal-move and check highlights."""
    logger = structlog.get_logger()

    square_clicked = Signal(str)

    def __init__(self, board_settings: BoardSettings, parent: QWidget | None = None):
        super().__init__(parent)
        self._settings = board_settings
        self._snapshot: Optional[GameSnapshot] = None
        self._interaction = InteractionState.idle()

        self.svg_widget = ClickableSvgWidget()
        self.svg_widget.setFixedSize(self._settings.size_px, self._settings.size_px)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.svg_widget, alignment=Qt.AlignmentFlag.AlignCenter)

        self.svg_widget.square_clicked.connect(self.square_clicked.emit)

    def _highlight_colors(self) -> Dict[Highlight, str]:
        return {
            Highlight.SELECTED: self._settings.selected_color,
            Highlight.LAST_MOVE: self._settings.last_move_color,
            Highlight.CHECK: self._settings.check_color,
        }

    def _render(self):
        if self._snapshot is None:
            return
        colors = self._highlight_colors()
        fill = {
            chess.parse_square(square): self._settings.legal_move_color
            for square in self._interaction.legal_destinations
        }
        for square, role in highlighted_squares(self._snapshot, self._interaction).items():
            fill[chess.parse_square(square)] = colors[role]

        svg_data = chess.svg.board(
            chess.Board(self._snapshot.fen),
            size=self._settings.size_px,
            coordinates=False,
            fill=fill,
        ).encode("utf-8")
        self.svg_widget.load(svg_data)

    def show_snapshot(self, snapshot: GameSnapshot):
        self._snapshot = snapshot
        self._render()

    def show_interaction(self, interaction: InteractionState):
        self.logger.debug("BoardView selection changed", selected=interaction.selected_square)
        self._interaction = interaction
        self._render()
