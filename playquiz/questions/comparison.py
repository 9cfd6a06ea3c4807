"""
Numeric comparison questions.

The player picks the comparator (<, =, >) that makes "left ? right" true.
The correct symbol is derived from the operands; an authored operator must
agree with it.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import model_validator

from . import QuestionType, register
from .base import QuestionBase, RetryPolicy, Verdict, as_text, format_number

OPERATORS = ("<", "=", ">")


class ComparisonQuestion(QuestionBase):
    type: Literal["comparison"] = "comparison"
    left: int | float
    right: int | float
    operator: Literal["<", "=", ">"] | None = None

    @model_validator(mode="after")
    def _check_operator(self) -> "ComparisonQuestion":
        if self.operator is not None and self.operator != self.correct_operator:
            raise ValueError(
                f"operator {self.operator!r} is wrong for {self.left} and {self.right}"
            )
        return self

    @property
    def correct_operator(self) -> str:
        if self.left < self.right:
            return "<"
        if self.left > self.right:
            return ">"
        return "="

    @property
    def prompt(self) -> str:
        return f"{format_number(self.left)} ? {format_number(self.right)}"

    @property
    def canonical(self) -> str:
        return f"{format_number(self.left)} {self.correct_operator} {format_number(self.right)}"

    def choices(self) -> tuple[str, ...]:
        return OPERATORS


@register(QuestionType.COMPARISON)
class ComparisonVerifier:
    """Verifier for comparison questions."""

    retry_policy = RetryPolicy()

    def check(self, question: ComparisonQuestion, answer: Any) -> Verdict:
        symbol = as_text(answer).strip()
        is_correct = symbol == question.correct_operator
        return Verdict(
            correct=is_correct,
            feedback="Correct!" if is_correct else "Look again at which number is bigger.",
            user_answer=symbol,
            expected=question.correct_operator,
        )

    def hint(self, question: ComparisonQuestion, attempt: int) -> str | None:
        if attempt == 1:
            return "The open side of < and > faces the bigger number."
        if attempt == 2:
            if question.correct_operator == "=":
                return "Both numbers are the same."
            bigger = max(question.left, question.right)
            return f"{format_number(bigger)} is the bigger number."
        return None
