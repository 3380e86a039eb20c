# chess_coach/config/settings.py
"""
Configuration settings for the Chess Coach application, powered by Pydantic.

This module centralizes all tunable parameters and default values. Settings
are loaded from environment variables, so the Gemini key, sound directory or
log level can be changed without touching code.
"""
import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Nested Models for Configuration Schemas ---

class AdvisorySettings(BaseModel):
    """Settings for the AI coach requests."""
    api_key: Optional[str] = Field(None, description="Gemini API key. Falls back to GEMINI_API_KEY or API_KEY.")
    model: str = Field("gemini-3-flash-preview", description="The Gemini model used for position analysis.")
    temperature: float = Field(0.7, ge=0.0, le=2.0, description="Sampling temperature for the coach prose.")
    timeout_s: float = Field(30.0, gt=0, description="Seconds to wait for a single coach response.")
    max_attempts: int = Field(2, ge=1, description="Attempts made when a request fails with a transient network error.")
    unavailable_message: str = "The AI coach is currently taking a break."
    empty_response_message: str = "I'm unable to analyze the position at this moment."

    @model_validator(mode='after')
    def fill_api_key_from_environment(self) -> 'AdvisorySettings':
        """Picks up the conventional key variables when no prefixed key is set."""
        if not self.api_key:
            self.api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY") or None
        return self

class AudioSettings(BaseModel):
    """Settings for the move sound cues."""
    sound_dir: str = Field("assets/sounds", description="Directory holding move.wav, capture.wav, check.wav, start.wav and end.wav.")
    volume: float = Field(0.8, ge=0.0, le=1.0)
    start_muted: bool = False

class BoardSettings(BaseModel):
    """Settings for the board and its highlights."""
    default_promotion: str = Field("q", description="Piece a pawn promotes to when no choice is given.")
    size_px: int = Field(560, ge=200)
    selected_color: str = "#f5f682cc"
    last_move_color: str = "#f5f68280"
    legal_move_color: str = "#00000026"
    check_color: str = "#ef4444cc"

    @field_validator('default_promotion')
    @classmethod
    def validate_promotion_piece(cls, value: str) -> str:
        value = value.lower()
        if value not in ("q", "r", "b", "n"):
            raise ValueError("Configuration error: default promotion must be one of q, r, b, n.")
        return value

# --- Main Application Settings Class ---

class Settings(BaseSettings):
    """
    Main configuration class for the application.

    It loads settings from environment variables with the prefix 'CHESS_COACH_'.
    Nested models can be configured using a double underscore delimiter, e.g.,
    `CHESS_COACH_ADVISORY__MODEL=gemini-2.5-flash`.
    """
    model_config = SettingsConfigDict(env_prefix='CHESS_COACH_', env_nested_delimiter='__')

    advisory: AdvisorySettings = Field(default_factory=AdvisorySettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    board: BoardSettings = Field(default_factory=BoardSettings)
    default_log_level: str = "INFO"
    log_file: Optional[str] = None

# A singleton instance of the settings, accessible throughout the application.
settings = Settings()
