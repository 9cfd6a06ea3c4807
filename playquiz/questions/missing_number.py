"""
Missing-number sequences.

A numeric sequence is shown with some slots blanked (null). The player
fills every gap; each filled value must equal the original number at that
position. Any gap still empty is the distinct "fill all gaps" case, which
is not counted as a wrong answer.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Literal

from pydantic import model_validator

from . import QuestionType, register
from .base import QuestionBase, RetryPolicy, Verdict, as_text, parse_number

GAP = "_"


class MissingNumberQuestion(QuestionBase):
    type: Literal["missing_number"] = "missing_number"
    original: tuple[int, ...]
    numbers: tuple[int | None, ...]

    @model_validator(mode="after")
    def _check_gaps(self) -> "MissingNumberQuestion":
        if len(self.original) != len(self.numbers):
            raise ValueError("numbers and original must have the same length")
        if len(self.numbers) < 2:
            raise ValueError("sequence needs at least 2 numbers")
        if not self.gaps:
            raise ValueError("sequence has no gaps")
        for shown, value in zip(self.numbers, self.original):
            if shown is not None and shown != value:
                raise ValueError(f"shown number {shown} does not match original {value}")
        return self

    @property
    def gaps(self) -> list[int]:
        return [i for i, n in enumerate(self.numbers) if n is None]

    @property
    def prompt(self) -> str:
        return ", ".join(GAP if n is None else str(n) for n in self.numbers)

    @property
    def canonical(self) -> str:
        return self.prompt


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


@register(QuestionType.MISSING_NUMBER)
class MissingNumberVerifier:
    """Verifier for missing-number sequences."""

    retry_policy = RetryPolicy()

    def check(self, question: MissingNumberQuestion, answer: Any) -> Verdict:
        expected = ", ".join(str(n) for n in question.original)
        fills = self._gap_fills(question, answer)

        if fills is None or any(_is_blank(v) for v in fills):
            return Verdict(
                correct=False,
                feedback="Fill in all the gaps first.",
                user_answer=as_text(answer),
                expected=expected,
                incomplete=True,
            )

        values = [parse_number(v) for v in fills]
        shown = ", ".join(str(v).strip() for v in fills)
        if any(v is None for v in values):
            return Verdict(
                correct=False,
                feedback="Only numbers can go in the gaps.",
                user_answer=shown,
                expected=expected,
            )

        is_correct = all(
            value == question.original[gap] for gap, value in zip(question.gaps, values)
        )
        return Verdict(
            correct=is_correct,
            feedback="Correct!" if is_correct else "Some missing numbers are wrong.",
            user_answer=shown,
            expected=expected,
        )

    def hint(self, question: MissingNumberQuestion, attempt: int) -> str | None:
        original = question.original
        steps = {b - a for a, b in zip(original, original[1:])}
        if attempt == 1 and len(steps) == 1:
            step = steps.pop()
            if step == 0:
                return "Every number is the same."
            direction = "up" if step > 0 else "down"
            return f"The numbers go {direction} by {abs(step)} each time."
        if attempt in (1, 2):
            gap = question.gaps[0]
            if gap > 0 and question.numbers[gap - 1] is not None:
                return f"The first missing number comes right after {question.numbers[gap - 1]}."
            return f"The first missing number is at position {gap + 1}."
        return None

    def _gap_fills(self, question: MissingNumberQuestion, answer: Any) -> list[Any] | None:
        """
        Extract the values typed into the gaps.

        Accepts the full sequence (known slots included) or just the gap
        values in order. Returns None when the shape matches neither.
        """
        if isinstance(answer, str):
            answer = [a.strip() for a in answer.split(",")]
        if not isinstance(answer, Sequence):
            return None

        if len(answer) == len(question.numbers):
            return [answer[i] for i in question.gaps]
        if len(answer) == len(question.gaps):
            return list(answer)
        return None
