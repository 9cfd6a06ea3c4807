"""
Score ledger: cumulative score plus per-question fail-once flags.

A question earns credit at most once, and only when it is answered
correctly before any failed attempt on it.
"""

from __future__ import annotations

from loguru import logger


class ScoreLedger:
    """Tracks score and the hasFailedOnce flag for each question index."""

    def __init__(self, total_questions: int):
        if total_questions < 0:
            raise ValueError("total_questions must be >= 0")
        self.total_questions = total_questions
        self.score = 0
        self._has_failed_once: list[bool] = [False] * total_questions
        self._credited: set[int] = set()

    def reset(self) -> None:
        self.score = 0
        self._has_failed_once = [False] * self.total_questions
        self._credited.clear()

    def has_failed_once(self, index: int) -> bool:
        self._check_index(index)
        return self._has_failed_once[index]

    def record(self, index: int, correct: bool) -> bool:
        """
        Apply one verdict to the ledger.

        Returns:
            True if this submission earned score credit.
        """
        self._check_index(index)

        if not correct:
            self._has_failed_once[index] = True
            return False

        if self._has_failed_once[index] or index in self._credited:
            logger.debug(f"Question {index} solved without credit")
            return False

        self._credited.add(index)
        self.score += 1
        return True

    def score_percent(self) -> float:
        """Score as a percentage rounded to 2 decimals (0 for an empty session)."""
        if self.total_questions == 0:
            return 0.0
        return round((self.score / self.total_questions) * 100, 2)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.total_questions:
            raise IndexError(f"question index {index} out of range")
