"""
Configuration settings for playquiz.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Session Timing
    # ========================================
    default_duration_s: int = Field(
        default=60,
        gt=0,
        description="Session length in seconds for every format except reading",
    )
    reading_duration_s: int = Field(
        default=120,
        gt=0,
        description="Session length in seconds for the reading format",
    )
    countdown_seconds: int = Field(
        default=3,
        ge=0,
        description="Length of the 3-2-1 countdown before the timer starts",
    )
    celebration_delay_s: float = Field(
        default=1.5,
        ge=0.0,
        description="Pause between a correct answer and the next question",
    )

    # ========================================
    # Retry Policy
    # ========================================
    reading_max_failures: int = Field(
        default=3,
        ge=1,
        description="Failed attempts before a reading question is skipped",
    )
    reshuffle_on_retry: bool = Field(
        default=True,
        description="Reshuffle presented tokens after a wrong sorting attempt",
    )
    shuffle_seed: int | None = Field(
        default=None,
        description="Seed for option shuffling (None = nondeterministic)",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional log file path",
    )

    # ========================================
    # Speech Recognition
    # ========================================
    speech_api_url: str | None = Field(
        default=None,
        description="Transcription endpoint (whisper-style multipart upload)",
    )
    speech_api_key: str | None = Field(
        default=None,
        description="Bearer token for the transcription endpoint",
    )
    speech_timeout_ms: int = Field(
        default=15000,
        description="Transcription request timeout in milliseconds",
    )
    speech_language: str = Field(
        default="en-US",
        description="Language hint sent with each recording",
    )

    def has_speech_configured(self) -> bool:
        """Check if a speech-to-text service is configured."""
        return bool(self.speech_api_url)

    def get_session_config(self) -> dict[str, float | int | bool | None]:
        """Get session timing and retry configuration as a dictionary."""
        return {
            "default_duration_s": self.default_duration_s,
            "reading_duration_s": self.reading_duration_s,
            "countdown_seconds": self.countdown_seconds,
            "celebration_delay_s": self.celebration_delay_s,
            "reading_max_failures": self.reading_max_failures,
            "reshuffle_on_retry": self.reshuffle_on_retry,
            "shuffle_seed": self.shuffle_seed,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
