"""
Text-to-speech capability used to read prompts and feedback aloud.
"""

from __future__ import annotations

from typing import Protocol

from loguru import logger


class SpeechSynthesizer(Protocol):
    @property
    def available(self) -> bool:
        ...

    def speak(self, text: str) -> None:
        ...


class SilentSynthesizer:
    """Default synthesizer: records what would have been spoken."""

    available = False

    def __init__(self) -> None:
        self.spoken: list[str] = []

    def speak(self, text: str) -> None:
        logger.debug(f"(silent) speak: {text}")
        self.spoken.append(text)
