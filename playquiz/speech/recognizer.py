"""
Speech-to-text capability for the reading format.

Recognition is an injected service with a capability flag rather than a
global. Hosts without a recognizer use UnavailableRecognizer and the session
shows a "cannot verify" notice instead of failing.
"""

from __future__ import annotations

from typing import Protocol

import httpx
from loguru import logger

from config import Settings, get_settings
from playquiz.errors import SpeechRecognitionError, SpeechUnavailableError


class SpeechRecognizer(Protocol):
    """Protocol for speech-to-text services."""

    @property
    def available(self) -> bool:
        ...

    def transcribe(self, audio: bytes) -> str:
        """Return the transcript of a recording."""
        ...


class UnavailableRecognizer:
    """Recognizer for hosts with no speech-to-text support."""

    available = False

    def transcribe(self, audio: bytes) -> str:
        raise SpeechUnavailableError("Speech recognition is not supported on this device.")


class HttpSpeechRecognizer:
    """
    Client for a whisper-style transcription endpoint.

    Posts the recording as multipart field "audio" and reads the transcript
    from {"text": ...} or {"data": {"text": ...}}.
    """

    def __init__(
        self,
        api_url: str | None,
        api_key: str | None = None,
        timeout_ms: int = 15000,
        language: str = "en-US",
        retry_attempts: int = 2,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the recognizer.

        Args:
            api_url: Transcription endpoint; None disables the recognizer
            api_key: Optional bearer token
            timeout_ms: Request timeout in milliseconds
            language: Language hint sent with each recording
            retry_attempts: Attempts on connection errors and 5xx responses
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.api_url = api_url.rstrip("/") if api_url else None
        self.language = language
        self.retry_attempts = max(1, retry_attempts)
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self.client = httpx.Client(
            timeout=httpx.Timeout(timeout_ms / 1000.0),
            headers=headers,
            follow_redirects=True,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "HttpSpeechRecognizer":
        settings = settings or get_settings()
        return cls(
            api_url=settings.speech_api_url,
            api_key=settings.speech_api_key,
            timeout_ms=settings.speech_timeout_ms,
            language=settings.speech_language,
        )

    @property
    def available(self) -> bool:
        return self.api_url is not None

    def close(self) -> None:
        self.client.close()

    def transcribe(self, audio: bytes) -> str:
        """
        Transcribe a recording.

        Raises:
            SpeechUnavailableError: if no endpoint is configured
            SpeechRecognitionError: if the service fails or returns no transcript
        """
        if not self.available:
            raise SpeechUnavailableError("No speech recognition service configured.")
        if not audio:
            raise SpeechRecognitionError("Empty recording")

        last_error: Exception | None = None
        for attempt in range(self.retry_attempts):
            try:
                response = self.client.post(
                    self.api_url,
                    files={"audio": ("recording.webm", audio, "application/octet-stream")},
                    data={"language": self.language},
                )
                response.raise_for_status()
                return self._parse_transcript(response.json())

            except httpx.HTTPStatusError as e:
                last_error = e
                if e.response.status_code < 500:
                    logger.error(f"Speech service rejected recording: {e.response.status_code}")
                    raise SpeechRecognitionError(f"Speech service error {e.response.status_code}") from e
                logger.warning(
                    f"Speech service error {e.response.status_code} on attempt "
                    f"{attempt + 1}/{self.retry_attempts}"
                )

            except httpx.RequestError as e:
                last_error = e
                logger.warning(f"Speech request error on attempt {attempt + 1}/{self.retry_attempts}: {e}")

            except ValueError as e:
                raise SpeechRecognitionError("Speech service returned invalid JSON") from e

        raise SpeechRecognitionError(
            f"Speech recognition failed after {self.retry_attempts} attempts"
        ) from last_error

    def _parse_transcript(self, payload: object) -> str:
        if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
            payload = payload["data"]
        text = payload.get("text") if isinstance(payload, dict) else None
        if not isinstance(text, str) or not text.strip():
            raise SpeechRecognitionError("No speech detected")
        return text.strip().lower()
