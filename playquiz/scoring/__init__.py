"""
Scoring primitives shared by every question format.

- accuracy: normalized edit-distance matcher for the reading format
- ledger: score and fail-once bookkeeping
- missed: deduplicating missed-question log
"""

from .accuracy import PASS_THRESHOLD, AccuracyResult, match, score
from .ledger import ScoreLedger
from .missed import MissedQuestionLog

__all__ = [
    "PASS_THRESHOLD",
    "AccuracyResult",
    "MissedQuestionLog",
    "ScoreLedger",
    "match",
    "score",
]
