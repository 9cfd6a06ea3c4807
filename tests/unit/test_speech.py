"""
Unit tests for the speech services.

The HTTP recognizer is exercised against httpx.MockTransport.
"""

import httpx
import pytest

from playquiz.errors import SpeechRecognitionError, SpeechUnavailableError
from playquiz.speech import HttpSpeechRecognizer, SilentSynthesizer, UnavailableRecognizer

API_URL = "https://speech.test/api/whisper"


def make_recognizer(handler, **kwargs):
    return HttpSpeechRecognizer(API_URL, transport=httpx.MockTransport(handler), **kwargs)


class TestHttpSpeechRecognizer:
    """Test transcription requests and error mapping."""

    def test_transcribes_wrapped_response(self):
        seen = {}

        def handler(request):
            request.read()
            seen["content_type"] = request.headers["content-type"]
            seen["auth"] = request.headers.get("authorization")
            seen["body"] = request.content
            return httpx.Response(200, json={"message": "ok", "data": {"text": " Drink "}})

        recognizer = make_recognizer(handler, api_key="secret")
        assert recognizer.transcribe(b"RIFF....") == "drink"
        assert seen["content_type"].startswith("multipart/form-data")
        assert seen["auth"] == "Bearer secret"
        assert b'name="audio"' in seen["body"]

    def test_plain_text_response(self):
        recognizer = make_recognizer(lambda request: httpx.Response(200, json={"text": "cat"}))
        assert recognizer.transcribe(b"x") == "cat"

    def test_no_speech_detected(self):
        recognizer = make_recognizer(lambda request: httpx.Response(200, json={"text": "  "}))
        with pytest.raises(SpeechRecognitionError):
            recognizer.transcribe(b"x")

    def test_client_error_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(400, json={"error": "bad audio"})

        with pytest.raises(SpeechRecognitionError):
            make_recognizer(handler, retry_attempts=3).transcribe(b"x")
        assert len(calls) == 1

    def test_server_error_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        with pytest.raises(SpeechRecognitionError):
            make_recognizer(handler, retry_attempts=2).transcribe(b"x")
        assert len(calls) == 2

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(SpeechRecognitionError):
            make_recognizer(handler).transcribe(b"x")

    def test_empty_recording(self):
        recognizer = make_recognizer(lambda request: httpx.Response(200, json={"text": "cat"}))
        with pytest.raises(SpeechRecognitionError):
            recognizer.transcribe(b"")

    def test_unconfigured_is_unavailable(self):
        recognizer = HttpSpeechRecognizer(None)
        assert not recognizer.available
        with pytest.raises(SpeechUnavailableError):
            recognizer.transcribe(b"x")

    def test_close_releases_client(self):
        recognizer = make_recognizer(lambda request: httpx.Response(200, json={"text": "cat"}))
        assert not recognizer.client.is_closed
        recognizer.close()
        assert recognizer.client.is_closed


class TestFallbacks:
    """Test the no-capability implementations."""

    def test_unavailable_recognizer(self):
        recognizer = UnavailableRecognizer()
        assert not recognizer.available
        with pytest.raises(SpeechUnavailableError):
            recognizer.transcribe(b"x")

    def test_silent_synthesizer_records(self):
        synthesizer = SilentSynthesizer()
        synthesizer.speak("drinks")
        assert synthesizer.spoken == ["drinks"]
