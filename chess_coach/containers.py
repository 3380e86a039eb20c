# chess_coach/containers.py
"""
Defines the Dependency Injection (DI) container for the application.

This module uses the `punq` library to wire the rules engine, the coach, the
audio service and the orchestrator together. The presentation layer resolves
what it needs from the container instead of constructing services itself,
which keeps the GUI free of configuration details and lets tests substitute
any collaborator.
"""
from typing import Mapping, Optional

import punq

from chess_coach.config.settings import Settings
from chess_coach.orchestration.orchestrator import MoveOrchestrator
from chess_coach.services.advisory_service import GeminiAdvisoryService
from chess_coach.services.audio_service import AudioService
from chess_coach.services.rules_engine import PythonChessRulesEngine
from chess_coach.types import (AdvisoryService, FeedbackEvent, Playable,
                               RulesEngine)


def get_container(
    app_settings: Settings,
    sound_registry: Optional[Mapping[FeedbackEvent, Playable]] = None,
) -> punq.Container:
    """
    Initializes and returns a DI container for one application session.

    Args:
        app_settings: The loaded application settings.
        sound_registry: Preloaded sound cues; without it every event is silent.
    """
    container = punq.Container()

    container.register(Settings, instance=app_settings)

    # Every service below is shared for the whole session.
    container.register(
        RulesEngine,
        factory=lambda: PythonChessRulesEngine(default_promotion=app_settings.board.default_promotion),
        scope=punq.Scope.singleton,
    )
    container.register(
        AdvisoryService,
        factory=lambda: GeminiAdvisoryService.create(app_settings.advisory),
        scope=punq.Scope.singleton,
    )
    container.register(
        AudioService,
        factory=lambda: AudioService(sound_registry or {}, muted=app_settings.audio.start_muted),
        scope=punq.Scope.singleton,
    )

    # The orchestrator's feedback sink and state callback are attached by the
    # controller that owns the GUI thread, so only the engine is injected here.
    container.register(
        MoveOrchestrator,
        factory=lambda: MoveOrchestrator(container.resolve(RulesEngine)),
        scope=punq.Scope.singleton,
    )

    return container
