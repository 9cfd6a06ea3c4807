"""
Question-bank loading.

Validates a structured payload (list of dicts, JSON text or a JSON file)
into the closed Question variant. Raw authoring-text formats are not
parsed here; hosts convert them to this shape first.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, Union

from loguru import logger
from pydantic import Field, TypeAdapter, ValidationError

from playquiz.errors import InvalidQuestionBankError

from .arithmetic import ArithmeticQuestion
from .comparison import ComparisonQuestion
from .fill_in_blank import FillInBlankQuestion
from .missing_number import MissingNumberQuestion
from .multiple_choice import MultipleChoiceQuestion
from .reading import ReadingQuestion
from .sorting import NumberSortQuestion, SentenceSortQuestion

Question = Annotated[
    Union[
        MultipleChoiceQuestion,
        ComparisonQuestion,
        FillInBlankQuestion,
        SentenceSortQuestion,
        NumberSortQuestion,
        MissingNumberQuestion,
        ArithmeticQuestion,
        ReadingQuestion,
    ],
    Field(discriminator="type"),
]

_BANK_ADAPTER: TypeAdapter[list[Question]] = TypeAdapter(list[Question])


def _format_errors(exc: ValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"])
        messages.append(f"{loc}: {err['msg']}")
    return messages


def _read_payload(source: Any) -> Any:
    if isinstance(source, Path):
        try:
            text = source.read_text(encoding="utf-8")
        except OSError as e:
            raise InvalidQuestionBankError(f"Cannot read question bank {source}: {e}") from e
        source = text

    if isinstance(source, (str, bytes)):
        try:
            source = json.loads(source)
        except json.JSONDecodeError as e:
            raise InvalidQuestionBankError(f"Question bank is not valid JSON: {e}") from e

    # {"questions": [...]} envelope
    if isinstance(source, dict) and "questions" in source:
        source = source["questions"]

    return source


def load_question_bank(source: Any) -> list[Question]:
    """
    Validate a question bank into typed questions, preserving order.

    Args:
        source: list of question dicts, JSON text, or a Path to a JSON file

    Raises:
        InvalidQuestionBankError: if the bank is empty or malformed
    """
    payload = _read_payload(source)

    if not isinstance(payload, list):
        raise InvalidQuestionBankError("Question bank must be a list of questions")
    if not payload:
        raise InvalidQuestionBankError("Question bank is empty")

    try:
        questions = _BANK_ADAPTER.validate_python(payload)
    except ValidationError as e:
        errors = _format_errors(e)
        logger.warning(f"Rejected question bank ({len(errors)} errors)")
        raise InvalidQuestionBankError("Question bank failed validation", errors=errors) from e

    logger.debug(f"Loaded {len(questions)} questions")
    return questions
