"""
Session state types: lifecycle enum, attempts, view snapshots and the
final report.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SessionState(str, Enum):
    """Lifecycle of a session."""

    INSTRUCTIONS = "instructions"
    COUNTDOWN = "countdown"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class CompletionReason(str, Enum):
    """Why a session reached COMPLETED."""

    TIMEOUT = "timeout"
    EXHAUSTED = "exhausted"  # last question answered or skipped
    ENDED = "ended"  # host ended the session early


@dataclass(frozen=True)
class Attempt:
    """One submission. Lives only long enough to be verified."""

    answer: Any
    submitted_at: float


@dataclass(frozen=True)
class SessionSnapshot:
    """View model for the host (pure data)."""

    state: SessionState
    index: int
    total_questions: int
    time_left: int
    score: int
    has_failed_once: bool
    last_correct: bool | None
    prompt: str
    choices: tuple[str, ...] = ()
    question_type: str | None = None
    countdown: int | None = None
    feedback: str | None = None
    help_text: str | None = None
    notice: str | None = None
    failures: int = 0
    advance_pending: bool = False
    exit_requested: bool = False


@dataclass(frozen=True)
class TypeTally:
    """Credited answers out of questions of one format."""

    correct: int = 0
    total: int = 0


@dataclass(frozen=True)
class SessionReport:
    """Outcome of a completed session, produced exactly once."""

    score: int
    total_questions: int
    score_percent: float
    missed_questions: str
    started_on: str
    reason: CompletionReason
    completed_on: str = ""
    time_spent: int = 0  # seconds of session time used
    questions_answered: int = 0  # solved, skipped or moved past
    question_type_breakdown: dict[str, TypeTally] = field(default_factory=dict)

    @property
    def score_percent_text(self) -> str:
        return f"{self.score_percent:.2f}"

    def to_dict(self) -> dict[str, Any]:
        """Payload handed to the host for persistence."""
        return {
            "scorePercent": self.score_percent_text,
            "missedQuestions": self.missed_questions,
            "startedOn": self.started_on,
            "completedOn": self.completed_on,
            "timeSpent": self.time_spent,
            "questionsAnswered": self.questions_answered,
            "questionTypeBreakdown": {
                question_type: {"correct": tally.correct, "total": tally.total}
                for question_type, tally in self.question_type_breakdown.items()
            },
        }
