"""
Reading practice questions.

The player reads a word aloud (or types what they read). The transcript is
scored with the accuracy matcher; at or above the pass threshold counts as
correct. Retries are bounded: after the session's failure limit the
question is skipped without credit.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from playquiz.scoring.accuracy import PASS_THRESHOLD, match

from . import QuestionType, register
from .base import QuestionBase, RetryPolicy, Verdict, as_text


class ReadingQuestion(QuestionBase):
    type: Literal["reading"] = "reading"
    word: str = Field(min_length=1)
    image: str | None = None
    audio: str | None = None
    pass_threshold: float = Field(default=PASS_THRESHOLD, ge=0.0, le=100.0)

    @property
    def prompt(self) -> str:
        return self.word

    @property
    def canonical(self) -> str:
        return self.word


@register(QuestionType.READING)
class ReadingVerifier:
    """Verifier for reading practice."""

    retry_policy = RetryPolicy(bounded=True)

    def check(self, question: ReadingQuestion, answer: Any) -> Verdict:
        transcript = as_text(answer).strip().lower()
        result = match(question.word, transcript, threshold=question.pass_threshold)

        if result.passed:
            feedback = "Great job!"
        elif not transcript:
            feedback = "I couldn't hear you. Please try again."
        else:
            feedback = f'Try again! You said "{transcript}"'

        return Verdict(
            correct=result.passed,
            feedback=feedback,
            user_answer=transcript,
            expected=question.word,
            accuracy=result.percentage,
        )

    def hint(self, question: ReadingQuestion, attempt: int) -> str | None:
        word = question.word
        if attempt == 1:
            return f"Listen and repeat: {word}"
        if attempt == 2 and len(word) > 1:
            return f"Say it slowly: {'-'.join(word)}"
        return None
