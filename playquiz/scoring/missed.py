"""
Missed-question log.

Insertion-ordered, duplicate-free record of the canonical strings of every
question answered incorrectly at least once. Entries are never removed.
"""

from __future__ import annotations

import json
from collections.abc import Iterator


class MissedQuestionLog:
    def __init__(self) -> None:
        self._entries: dict[str, None] = {}

    def record(self, canonical: str) -> bool:
        """Add an entry. Returns False if it was already present."""
        if canonical in self._entries:
            return False
        self._entries[canonical] = None
        return True

    def entries(self) -> list[str]:
        return list(self._entries)

    def serialize(self) -> str:
        """JSON array of canonical strings, in first-miss order."""
        return json.dumps(self.entries(), ensure_ascii=False)

    def __contains__(self, canonical: object) -> bool:
        return canonical in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
