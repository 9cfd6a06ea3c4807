"""
Sorting questions.

- Sentence sort: shuffled words must be put back into the original sentence.
- Number sort: numbers must be ordered ascending or descending.

Only the full sequence counts; there is no partial credit. Wrong attempts
reshuffle the presented tokens.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import model_validator

from . import QuestionType, register
from .base import QuestionBase, RetryPolicy, Verdict, format_number, parse_number, split_tokens


class SentenceSortQuestion(QuestionBase):
    type: Literal["sentence_sort"] = "sentence_sort"
    sentence: str

    @model_validator(mode="after")
    def _check_sentence(self) -> "SentenceSortQuestion":
        if len(self.tokens) < 2:
            raise ValueError("sentence sort needs at least 2 words")
        return self

    @property
    def tokens(self) -> list[str]:
        return self.sentence.split()

    @property
    def prompt(self) -> str:
        return "Put the words in the right order"

    @property
    def canonical(self) -> str:
        return self.sentence

    def choices(self) -> tuple[str, ...]:
        return tuple(self.tokens)

    def answer_order(self) -> tuple[str, ...]:
        return tuple(self.tokens)


class NumberSortQuestion(QuestionBase):
    type: Literal["number_sort"] = "number_sort"
    numbers: tuple[int | float, ...]
    order: Literal["ascending", "descending"] = "ascending"

    @model_validator(mode="after")
    def _check_numbers(self) -> "NumberSortQuestion":
        if len(self.numbers) < 2:
            raise ValueError("number sort needs at least 2 numbers")
        return self

    @property
    def target(self) -> list[int | float]:
        return sorted(self.numbers, reverse=self.order == "descending")

    @property
    def prompt(self) -> str:
        direction = "smallest to biggest" if self.order == "ascending" else "biggest to smallest"
        return f"Sort the numbers from {direction}"

    @property
    def canonical(self) -> str:
        return f"{', '.join(format_number(n) for n in self.numbers)} ({self.order})"

    def choices(self) -> tuple[str, ...]:
        return tuple(format_number(n) for n in self.numbers)

    def answer_order(self) -> tuple[str, ...]:
        return tuple(format_number(n) for n in self.target)


@register(QuestionType.SENTENCE_SORT)
class SentenceSortVerifier:
    """Verifier for sentence sorting."""

    retry_policy = RetryPolicy(reshuffle=True)

    def check(self, question: SentenceSortQuestion, answer: Any) -> Verdict:
        words = split_tokens(answer)
        is_correct = words == question.tokens
        return Verdict(
            correct=is_correct,
            feedback="Correct! Perfect sentence." if is_correct else "The words are not in the right order yet.",
            user_answer=" ".join(words),
            expected=question.sentence,
        )

    def hint(self, question: SentenceSortQuestion, attempt: int) -> str | None:
        tokens = question.tokens
        if attempt == 1:
            return f"First word: {tokens[0]}"
        if attempt == 2:
            return f"Last word: {tokens[-1]}"
        return None


@register(QuestionType.NUMBER_SORT)
class NumberSortVerifier:
    """Verifier for number sorting."""

    retry_policy = RetryPolicy(reshuffle=True)

    def check(self, question: NumberSortQuestion, answer: Any) -> Verdict:
        tokens = answer if isinstance(answer, (list, tuple)) else split_tokens(answer, commas=True)
        values = [parse_number(t) for t in tokens]
        expected = ", ".join(format_number(n) for n in question.target)
        shown = ", ".join(str(t) for t in tokens)

        if any(v is None for v in values):
            return Verdict(
                correct=False,
                feedback="Use only numbers.",
                user_answer=shown,
                expected=expected,
            )

        is_correct = values == question.target
        return Verdict(
            correct=is_correct,
            feedback="Correct!" if is_correct else f"Not in {question.order} order yet.",
            user_answer=shown,
            expected=expected,
        )

    def hint(self, question: NumberSortQuestion, attempt: int) -> str | None:
        target = question.target
        if attempt == 1:
            which = "smallest" if question.order == "ascending" else "biggest"
            return f"Start with the {which} number: {format_number(target[0])}"
        if attempt == 2:
            return f"The last number is {format_number(target[-1])}"
        return None
