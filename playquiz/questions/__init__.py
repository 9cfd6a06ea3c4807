"""
Question formats and their answer verifiers.

Each format has its own module with:
- a frozen pydantic model for the question payload (tagged by `type`)
- a verifier registered for that tag, exposing:
  - check(): decide whether an answer is correct
  - hint(): progressive help text for the help surface
  - retry_policy: how the session remediates a wrong answer
"""

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .base import Verifier


class QuestionType(str, Enum):
    """Supported question formats."""
    MULTIPLE_CHOICE = "multiple_choice"
    COMPARISON = "comparison"
    FILL_IN_BLANK = "fill_in_blank"
    SENTENCE_SORT = "sentence_sort"
    NUMBER_SORT = "number_sort"
    MISSING_NUMBER = "missing_number"
    ARITHMETIC = "arithmetic"
    READING = "reading"


# Verifier registry - populated by @register decorator
VERIFIERS: dict[QuestionType, "Verifier"] = {}


def register(question_type: QuestionType):
    """Decorator to register a verifier."""
    def decorator(cls):
        VERIFIERS[question_type] = cls()
        return cls
    return decorator


def get_verifier(question_type: str | QuestionType) -> "Verifier | None":
    """Get the verifier for a question type."""
    if isinstance(question_type, str) and not isinstance(question_type, QuestionType):
        try:
            question_type = QuestionType(question_type.lower())
        except ValueError:
            return None
    return VERIFIERS.get(question_type)


# Import formats to trigger registration
from . import multiple_choice
from . import comparison
from . import fill_in_blank
from . import sorting
from . import missing_number
from . import arithmetic
from . import reading

from .bank import Question, load_question_bank

__all__ = [
    "Question",
    "QuestionType",
    "VERIFIERS",
    "get_verifier",
    "load_question_bank",
    "register",
]
