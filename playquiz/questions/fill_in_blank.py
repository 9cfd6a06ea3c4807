"""
Fill-in-the-blank questions.

One word of a sentence is blanked out; the player supplies it from a word
bank or by typing. Matching is case-insensitive.
"""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import model_validator

from . import QuestionType, register
from .base import QuestionBase, RetryPolicy, Verdict, as_text

BLANK = "_________"


def _word_pattern(word: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE)


class FillInBlankQuestion(QuestionBase):
    type: Literal["fill_in_blank"] = "fill_in_blank"
    sentence: str
    missing_word: str
    word_bank: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_word(self) -> "FillInBlankQuestion":
        if not self.missing_word.strip():
            raise ValueError("missing_word must not be empty")
        if not _word_pattern(self.missing_word).search(self.sentence):
            raise ValueError(f"{self.missing_word!r} does not appear in the sentence")
        return self

    @property
    def prompt(self) -> str:
        return _word_pattern(self.missing_word).sub(BLANK, self.sentence, count=1)

    @property
    def canonical(self) -> str:
        return self.sentence

    def choices(self) -> tuple[str, ...]:
        return self.word_bank


@register(QuestionType.FILL_IN_BLANK)
class FillInBlankVerifier:
    """Verifier for fill-in-the-blank questions."""

    retry_policy = RetryPolicy()

    def check(self, question: FillInBlankQuestion, answer: Any) -> Verdict:
        word = as_text(answer).strip()
        is_correct = word.lower() == question.missing_word.lower()
        return Verdict(
            correct=is_correct,
            feedback="Correct!" if is_correct else "That word doesn't fit. Try again!",
            user_answer=word,
            expected=question.missing_word,
        )

    def hint(self, question: FillInBlankQuestion, attempt: int) -> str | None:
        word = question.missing_word
        if attempt == 1:
            return f"Starts with: {word[0]}..."
        if attempt == 2:
            return f"The word has {len(word)} letters"
        if attempt == 3 and len(word) > 2:
            return f"Starts with '{word[0]}', ends with '{word[-1]}'"
        return None
