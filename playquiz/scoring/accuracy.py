"""
Accuracy matcher for the reading format.

Scores how close a recognized (spoken or typed) token is to the expected one
as a normalized edit-distance similarity:

    percentage = 100 * (1 - distance / max(len(expected), len(recognized)))

Comparison is case-insensitive on whitespace-trimmed input. An empty
recognition scores 0.
"""

from __future__ import annotations

from dataclasses import dataclass

from rapidfuzz.distance import Levenshtein

PASS_THRESHOLD = 60.0


@dataclass(frozen=True)
class AccuracyResult:
    """Similarity between an expected token and what was recognized."""

    expected: str
    recognized: str
    distance: int
    percentage: float
    threshold: float = PASS_THRESHOLD

    @property
    def passed(self) -> bool:
        return self.percentage >= self.threshold


def _normalize(text: str) -> str:
    return text.strip().lower()


def score(expected: str, recognized: str) -> float:
    """Return similarity percentage in [0, 100]."""
    return match(expected, recognized).percentage


def match(expected: str, recognized: str, threshold: float = PASS_THRESHOLD) -> AccuracyResult:
    """Score a recognition and keep the intermediate distance for feedback."""
    exp = _normalize(expected)
    rec = _normalize(recognized)

    if not rec:
        return AccuracyResult(expected=exp, recognized=rec, distance=len(exp), percentage=0.0, threshold=threshold)

    distance = Levenshtein.distance(exp, rec)
    longest = max(len(exp), len(rec))
    percentage = 100.0 * (1.0 - distance / longest)
    percentage = max(0.0, min(100.0, percentage))

    return AccuracyResult(
        expected=exp,
        recognized=rec,
        distance=distance,
        percentage=round(percentage, 2),
        threshold=threshold,
    )
