# chess_coach/utils/qt_logging.py
"""
Provides a custom structlog processor that forwards user-facing log events to
the status bar of the PySide6 window.
"""
from typing import Any

from PySide6.QtCore import QObject, Signal
from structlog.types import EventDict


class QLogEmitter(QObject):
    """Carries status-bar messages from any thread to the GUI thread."""
    log_generated = Signal(str)


class QtSignalProcessor:
    """
    A structlog processor that emits a Qt signal for events logged with
    `show_in_gui=True`. The flag is removed from the event so it does not
    clutter the console output.
    """
    def __init__(self):
        self.emitter = QLogEmitter()

    def __call__(self, logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        if event_dict.pop('show_in_gui', False):
            message = event_dict.get('event', '')
            if method_name in ('warning', 'error', 'critical', 'exception'):
                message = f"{method_name.capitalize()}: {message}"
            self.emitter.log_generated.emit(message)
        return event_dict
