# chess_coach/services/audio_service.py
"""
Plays the sound cue that matches a feedback event.

The registry of cues is filled once at startup and only read afterwards. The
service is deliberately forgiving: an event without a registered sound does
nothing, and a cue that fails to play is logged and otherwise ignored, so
audio can never interrupt a game.
"""
from types import MappingProxyType
from typing import Mapping

import structlog

from chess_coach.exceptions import AudioPlaybackError
from chess_coach.types import FeedbackEvent, Playable

logger = structlog.get_logger(__name__)


class AudioService:
    """Maps feedback events to playable cues and honours the mute toggle."""

    def __init__(self, registry: Mapping[FeedbackEvent, Playable], muted: bool = False):
        self._registry = MappingProxyType(dict(registry))
        self._muted = muted

    @property
    def muted(self) -> bool:
        return self._muted

    def set_muted(self, muted: bool) -> None:
        self._muted = muted
        logger.debug("Audio mute changed.", muted=muted)

    def toggle_mute(self) -> bool:
        """Flips the mute flag and returns the new value."""
        self.set_muted(not self._muted)
        return self._muted

    def has_sound(self, event: FeedbackEvent) -> bool:
        return event in self._registry

    def play(self, event: FeedbackEvent) -> None:
        if self._muted:
            return
        cue = self._registry.get(event)
        if cue is None:
            return
        try:
            cue.play()
        except AudioPlaybackError as e:
            logger.warning("Audio playback failed.", feedback_event=event.value, error=str(e))
        except Exception:
            logger.error("Unexpected error during audio playback.", feedback_event=event.value, exc_info=True)
