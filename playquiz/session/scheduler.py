"""
Cooperative scheduler for session timing.

Sessions never sleep or spawn threads. Delayed work (timer ticks, the
countdown, post-answer advances) is registered here and fired when the host
pumps `run_pending()`. Time comes entirely from an injected Clock, so tests
drive it with a fake clock and the terminal host with a monotonic one.

Tasks fire in due-time order. A task scheduled from inside a callback is
timed from the firing task's due time, so a late pump catches up on every
tick it missed instead of drifting.
"""

from __future__ import annotations

import heapq
import itertools
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from loguru import logger


class Clock(Protocol):
    """Monotonic clock abstraction."""

    def now(self) -> float:
        """Return monotonic seconds."""


class RealClock:
    """Production clock backed by time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()


@dataclass(eq=False)
class ScheduledTask:
    """Handle for one pending callback."""

    due_at: float
    callback: Callable[[], None]
    name: str = ""
    cancelled: bool = False
    done: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.done)


@dataclass(order=True)
class _Entry:
    due_at: float
    seq: int
    task: ScheduledTask = field(compare=False)


class Scheduler:
    """Runs scheduled callbacks when the host pumps it."""

    def __init__(self, clock: Clock | None = None):
        self.clock = clock or RealClock()
        self._queue: list[_Entry] = []
        self._seq = itertools.count()
        self._dispatch_time: float | None = None

    def now(self) -> float:
        if self._dispatch_time is not None:
            return self._dispatch_time
        return self.clock.now()

    def call_later(self, delay_s: float, callback: Callable[[], None], *, name: str = "") -> ScheduledTask:
        if delay_s < 0:
            raise ValueError("delay_s must be >= 0")
        task = ScheduledTask(due_at=self.now() + delay_s, callback=callback, name=name)
        heapq.heappush(self._queue, _Entry(task.due_at, next(self._seq), task))
        return task

    def run_pending(self) -> int:
        """Fire every task that is due. Returns the number of callbacks run."""
        now = self.clock.now()
        fired = 0
        while self._queue and self._queue[0].due_at <= now:
            entry = heapq.heappop(self._queue)
            task = entry.task
            if task.cancelled:
                continue
            task.done = True
            self._dispatch_time = task.due_at
            try:
                task.callback()
            finally:
                self._dispatch_time = None
            fired += 1
        if fired:
            logger.trace(f"Scheduler fired {fired} task(s)")
        return fired

    def next_due(self) -> float | None:
        """Due time of the earliest live task, if any."""
        while self._queue and self._queue[0].task.cancelled:
            heapq.heappop(self._queue)
        return self._queue[0].due_at if self._queue else None

    def pending(self) -> int:
        return sum(1 for e in self._queue if e.task.active)
