"""
Session options: the plain values a SessionController runs with.

Built from Settings by the host so the controller never reads global
configuration itself.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from config import Settings, get_settings
from playquiz.questions import QuestionType


@dataclass
class SessionOptions:
    """Timing and remediation knobs for one session."""

    default_duration_s: int = 60
    reading_duration_s: int = 120
    countdown_seconds: int = 3
    celebration_delay_s: float = 1.5
    reading_max_failures: int = 3
    reshuffle_on_retry: bool = True
    shuffle_seed: int | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "SessionOptions":
        settings = settings or get_settings()
        return cls(**settings.get_session_config())

    def duration_for(self, questions: Sequence) -> int:
        """Default duration: reading sessions run longer than the other formats."""
        if questions and all(q.type == QuestionType.READING for q in questions):
            return self.reading_duration_s
        return self.default_duration_s
