"""
Injectable speech services for the reading format.
"""

from .recognizer import HttpSpeechRecognizer, SpeechRecognizer, UnavailableRecognizer
from .synthesizer import SilentSynthesizer, SpeechSynthesizer

__all__ = [
    "HttpSpeechRecognizer",
    "SilentSynthesizer",
    "SpeechRecognizer",
    "SpeechSynthesizer",
    "UnavailableRecognizer",
]
