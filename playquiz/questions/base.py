"""
Base model, protocol and result types for question verifiers.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict


@dataclass(frozen=True)
class Verdict:
    """Result of checking one answer."""
    correct: bool
    feedback: str
    user_answer: str
    expected: str
    incomplete: bool = False  # answer not finished yet; never penalized
    accuracy: float | None = None  # reading format only


@dataclass(frozen=True)
class RetryPolicy:
    """
    How a session remediates a wrong answer.

    Unlimited policies keep the question current until it is solved; a
    bounded policy force-advances once the session's failure limit is hit.
    """
    bounded: bool = False
    reshuffle: bool = False


class QuestionBase(BaseModel):
    """Common shape of every question payload. Immutable once loaded."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    hint: str | None = None  # author-supplied help text, shown before generated hints

    @property
    def prompt(self) -> str:
        raise NotImplementedError

    @property
    def canonical(self) -> str:
        """Human-readable record used as the missed-question key."""
        raise NotImplementedError

    def choices(self) -> tuple[str, ...]:
        """Tokens presented to the player (options, word bank, items to sort)."""
        return ()

    def answer_order(self) -> tuple[str, ...]:
        """The solved arrangement of choices(), for formats answered by ordering them."""
        return ()


class Verifier(Protocol):
    """Protocol for question verifiers."""

    retry_policy: RetryPolicy

    def check(self, question: Any, answer: Any) -> Verdict:
        """Decide whether the answer solves the question."""
        ...

    def hint(self, question: Any, attempt: int) -> str | None:
        """Help text for the Nth help request. Returns None if no hint available."""
        ...


def as_text(answer: Any) -> str:
    """Render a raw answer for feedback."""
    if answer is None:
        return ""
    if isinstance(answer, str):
        return answer
    if isinstance(answer, Sequence):
        return " ".join(as_text(a) for a in answer)
    return str(answer)


def parse_number(value: Any) -> int | float | None:
    """Parse a player-entered number. Returns None when it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if isinstance(value, float) and not math.isfinite(value) else value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def split_tokens(answer: Any, *, commas: bool = False) -> list[str]:
    """Accept either a token list or a whitespace (optionally comma) delimited string."""
    if answer is None:
        return []
    if isinstance(answer, str):
        if commas:
            answer = answer.replace(",", " ")
        return answer.split()
    return [str(a) for a in answer]
