# tests/services/test_audio_service.py
from unittest.mock import MagicMock

from chess_coach.exceptions import AudioPlaybackError
from chess_coach.services.audio_service import AudioService
from chess_coach.types import FeedbackEvent


def test_play_uses_the_registered_cue():
    move_cue, capture_cue = MagicMock(), MagicMock()
    service = AudioService({FeedbackEvent.MOVE: move_cue, FeedbackEvent.CAPTURE: capture_cue})

    service.play(FeedbackEvent.CAPTURE)

    capture_cue.play.assert_called_once_with()
    move_cue.play.assert_not_called()

def test_missing_cue_is_silently_ignored():
    service = AudioService({})
    service.play(FeedbackEvent.END)
    assert not service.has_sound(FeedbackEvent.END)

def test_playback_failures_do_not_raise():
    failing = MagicMock()
    failing.play.side_effect = AudioPlaybackError("no output device")
    crashing = MagicMock()
    crashing.play.side_effect = RuntimeError("backend gone")
    service = AudioService({FeedbackEvent.MOVE: failing, FeedbackEvent.CHECK: crashing})

    service.play(FeedbackEvent.MOVE)
    service.play(FeedbackEvent.CHECK)

    failing.play.assert_called_once()
    crashing.play.assert_called_once()

def test_mute_suppresses_playback():
    cue = MagicMock()
    service = AudioService({FeedbackEvent.START: cue})

    assert service.toggle_mute() is True
    service.play(FeedbackEvent.START)
    cue.play.assert_not_called()

    assert service.toggle_mute() is False
    service.play(FeedbackEvent.START)
    cue.play.assert_called_once()

def test_registry_is_copied_at_construction():
    registry = {}
    service = AudioService(registry, muted=True)
    registry[FeedbackEvent.MOVE] = MagicMock()

    assert service.muted
    assert not service.has_sound(FeedbackEvent.MOVE)
