"""
Exception types raised by playquiz.

Illegal session transitions are not errors; the controller ignores them.
Everything here is recoverable at the session level.
"""


class PlayQuizError(Exception):
    """Base class for playquiz errors."""


class InvalidQuestionBankError(PlayQuizError):
    """Question bank is empty or does not validate."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


class SpeechUnavailableError(PlayQuizError):
    """No speech-to-text capability is available on this host."""


class SpeechRecognitionError(PlayQuizError):
    """The recognizer was reachable but could not produce a transcript."""
