"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from playquiz.questions import load_question_bank
from playquiz.session import Scheduler, SessionOptions


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (full sessions and CLI)")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0):
        self.t = start

    def now(self) -> float:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += seconds


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return Scheduler(clock)


@pytest.fixture
def pump(clock, scheduler):
    """Advance the fake clock and fire whatever became due."""
    def _pump(seconds: float) -> int:
        clock.advance(seconds)
        return scheduler.run_pending()
    return _pump


@pytest.fixture
def options():
    """Session options with the standard timings and a fixed shuffle seed."""
    return SessionOptions(
        default_duration_s=60,
        reading_duration_s=120,
        countdown_seconds=3,
        celebration_delay_s=1.5,
        reading_max_failures=3,
        reshuffle_on_retry=True,
        shuffle_seed=7,
    )


@pytest.fixture
def multiple_choice_payload():
    """Three multiple choice questions."""
    return [
        {
            "type": "multiple_choice",
            "question": "What color is the sky?",
            "options": ["Red", "Blue", "Green"],
            "answer": "Blue",
        },
        {
            "type": "multiple_choice",
            "question": "How many legs does a cat have?",
            "options": ["2", "4", "6"],
            "answer": "4",
        },
        {
            "type": "multiple_choice",
            "question": "Which animal says moo?",
            "options": ["Dog", "Cow", "Duck"],
            "answer": "Cow",
        },
    ]


@pytest.fixture
def multiple_choice_questions(multiple_choice_payload):
    return load_question_bank(multiple_choice_payload)


@pytest.fixture
def mixed_payload():
    """One question of every format."""
    return [
        {"type": "multiple_choice", "question": "2 + 2?", "options": ["3", "4"], "answer": "4"},
        {"type": "comparison", "left": 5, "right": 3},
        {"type": "fill_in_blank", "sentence": "The cat sat on the mat.", "missing_word": "mat"},
        {"type": "sentence_sort", "sentence": "I like green apples"},
        {"type": "number_sort", "numbers": [3, 1, 2], "order": "ascending"},
        {"type": "missing_number", "original": [1, 2, 3, 4], "numbers": [1, 2, None, 4]},
        {"type": "arithmetic", "first": 3, "operator": "+", "second": 4, "result": 7},
        {"type": "reading", "word": "drinks"},
    ]


@pytest.fixture
def bank_file(tmp_path, multiple_choice_payload):
    """Question bank written to a JSON file."""
    import json

    path = tmp_path / "bank.json"
    path.write_text(json.dumps(multiple_choice_payload), encoding="utf-8")
    return path
