# chess_coach/services/qt_sound.py
"""
Loads the move sound cues as `QSoundEffect` objects.

Kept apart from `audio_service` so that the audio logic can be used and
tested without the QtMultimedia backend.
"""
from pathlib import Path
from typing import TYPE_CHECKING, Dict

import structlog
from PySide6.QtCore import QUrl
from PySide6.QtMultimedia import QSoundEffect

from chess_coach.exceptions import AudioPlaybackError
from chess_coach.types import FeedbackEvent, Playable

if TYPE_CHECKING:
    from chess_coach.config.settings import AudioSettings

logger = structlog.get_logger(__name__)


class QtSoundCue:
    """A `Playable` wrapping one preloaded `QSoundEffect`."""

    def __init__(self, effect: QSoundEffect, path: Path):
        self._effect = effect
        self._path = path

    def play(self) -> None:
        if self._effect.status() == QSoundEffect.Status.Error:
            raise AudioPlaybackError(f"Sound could not be loaded: {self._path}")
        # Restart the cue if the previous move's sound is still playing.
        self._effect.stop()
        self._effect.play()


def load_sound_effects(settings: "AudioSettings") -> Dict[FeedbackEvent, Playable]:
    """
    Builds a cue for every `<event>.wav` file found in `settings.sound_dir`.

    Must be called after the `QApplication` exists. Missing files are skipped
    with a warning; the corresponding events simply stay silent.
    """
    sound_dir = Path(settings.sound_dir)
    registry: Dict[FeedbackEvent, Playable] = {}
    for event in FeedbackEvent:
        path = sound_dir / f"{event.value}.wav"
        if not path.is_file():
            logger.warning("Sound file not found, event will be silent.", feedback_event=event.value, path=str(path))
            continue
        effect = QSoundEffect()
        effect.setSource(QUrl.fromLocalFile(str(path.resolve())))
        effect.setVolume(settings.volume)
        registry[event] = QtSoundCue(effect, path)
    logger.info("Sound effects loaded.", loaded=sorted(e.value for e in registry))
    return registry
