"""
Arithmetic entry questions.

An equation such as 3 + 4 = 7 is shown with one term hidden; the player
types the hidden term as a whole number.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import model_validator

from . import QuestionType, register
from .base import QuestionBase, RetryPolicy, Verdict, as_text

SLOT = "?"


def _evaluate(first: int, operator: str, second: int) -> int | float | None:
    if operator == "+":
        return first + second
    if operator == "-":
        return first - second
    if operator == "*":
        return first * second
    if second == 0:
        return None
    return first / second


class ArithmeticQuestion(QuestionBase):
    type: Literal["arithmetic"] = "arithmetic"
    first: int
    operator: Literal["+", "-", "*", "/"]
    second: int
    result: int
    hidden: Literal["first", "second", "result"] = "result"

    @model_validator(mode="after")
    def _check_equation(self) -> "ArithmeticQuestion":
        if _evaluate(self.first, self.operator, self.second) != self.result:
            raise ValueError(f"{self.canonical} is not a true equation")
        return self

    @property
    def answer(self) -> int:
        return {"first": self.first, "second": self.second, "result": self.result}[self.hidden]

    @property
    def prompt(self) -> str:
        first = SLOT if self.hidden == "first" else str(self.first)
        second = SLOT if self.hidden == "second" else str(self.second)
        result = SLOT if self.hidden == "result" else str(self.result)
        return f"{first} {self.operator} {second} = {result}"

    @property
    def canonical(self) -> str:
        return f"{self.first}{self.operator}{self.second}={self.result}"


@register(QuestionType.ARITHMETIC)
class ArithmeticVerifier:
    """Verifier for arithmetic entry questions."""

    retry_policy = RetryPolicy()

    def check(self, question: ArithmeticQuestion, answer: Any) -> Verdict:
        raw = as_text(answer).strip()
        try:
            value = int(raw)
        except ValueError:
            return Verdict(
                correct=False,
                feedback="Type a whole number.",
                user_answer=raw,
                expected=str(question.answer),
            )

        is_correct = value == question.answer
        return Verdict(
            correct=is_correct,
            feedback="Correct!" if is_correct else "Not quite. Try again!",
            user_answer=raw,
            expected=str(question.answer),
        )

    def hint(self, question: ArithmeticQuestion, attempt: int) -> str | None:
        if attempt != 1:
            return None
        return {
            "first": "Find the first number",
            "second": "Find the second number",
            "result": "Calculate the result",
        }[question.hidden]
