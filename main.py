# main.py
"""
The main entry point for launching the Chess Coach Desktop application.
"""
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication
from qt_material import apply_stylesheet

from chess_coach.config.settings import settings
from chess_coach.services.qt_sound import load_sound_effects
from chess_coach.utils.logging_config import setup_logging
from chess_coach.utils.qt_logging import QtSignalProcessor
from desktop_app import MainWindow


def main():
    """Main function to setup and run the application."""
    qt_processor = QtSignalProcessor()
    setup_logging(
        log_level=settings.default_log_level,
        log_file=Path(settings.log_file) if settings.log_file else None,
        extra_processors=[qt_processor],
    )

    app = QApplication(sys.argv)
    apply_stylesheet(app, theme='dark_teal.xml')

    # Sound effects need a running QApplication, so they are loaded here and handed to the window.
    window = MainWindow(log_emitter=qt_processor.emitter, sound_registry=load_sound_effects(settings.audio))
    window.show()
    sys.exit(app.exec())

if __name__ == "__main__":
    main()
