"""
Multiple choice questions.

- Presents a prompt with several options.
- Exactly one option is correct; matching is exact string equality.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import model_validator

from . import QuestionType, register
from .base import QuestionBase, RetryPolicy, Verdict, as_text


class MultipleChoiceQuestion(QuestionBase):
    type: Literal["multiple_choice"] = "multiple_choice"
    question: str
    options: tuple[str, ...]
    answer: str
    image: str | None = None

    @model_validator(mode="after")
    def _check_options(self) -> "MultipleChoiceQuestion":
        if len(self.options) < 2:
            raise ValueError("multiple choice needs at least 2 options")
        if len(set(self.options)) != len(self.options):
            raise ValueError("options must be unique")
        if self.answer not in self.options:
            raise ValueError(f"answer {self.answer!r} is not one of the options")
        return self

    @property
    def prompt(self) -> str:
        return self.question

    @property
    def canonical(self) -> str:
        return self.question

    def choices(self) -> tuple[str, ...]:
        return self.options


@register(QuestionType.MULTIPLE_CHOICE)
class MultipleChoiceVerifier:
    """Verifier for multiple choice questions."""

    retry_policy = RetryPolicy()

    def check(self, question: MultipleChoiceQuestion, answer: Any) -> Verdict:
        selected = as_text(answer)
        is_correct = selected == question.answer
        return Verdict(
            correct=is_correct,
            feedback="Correct!" if is_correct else "Not quite. Try again!",
            user_answer=selected,
            expected=question.answer,
        )

    def hint(self, question: MultipleChoiceQuestion, attempt: int) -> str | None:
        """Each help request rules out one more wrong option."""
        wrong = [o for o in question.options if o != question.answer]
        if attempt < 1 or attempt > len(wrong):
            return None
        return f"'{wrong[attempt - 1]}' is NOT the answer"
