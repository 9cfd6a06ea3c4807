"""
Timer / pause coordinator.

Owns the session countdown: one tick per second while running, frozen
while paused, terminal at zero. Pausing drops the partly elapsed second;
resuming waits a full second before the next tick.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from .scheduler import ScheduledTask, Scheduler

TICK_SECONDS = 1.0


@dataclass
class TimerState:
    time_left: int
    is_paused: bool = False
    is_expired: bool = False


class TimerCoordinator:
    """Drives TimerState through a scheduled, cancellable tick."""

    def __init__(
        self,
        scheduler: Scheduler,
        duration_s: int,
        on_expire: Callable[[], None],
        on_tick: Callable[[int], None] | None = None,
    ):
        if duration_s <= 0:
            raise ValueError("duration_s must be > 0")
        self._scheduler = scheduler
        self._on_expire = on_expire
        self._on_tick = on_tick
        self.state = TimerState(time_left=int(duration_s))
        self._running = False
        self._stopped = False
        self._handle: ScheduledTask | None = None

    @property
    def time_left(self) -> int:
        return self.state.time_left

    @property
    def is_expired(self) -> bool:
        return self.state.is_expired

    @property
    def is_paused(self) -> bool:
        return self.state.is_paused

    @property
    def ticking(self) -> bool:
        return self._running and not self._stopped and not self.state.is_paused and not self.state.is_expired

    def start(self) -> None:
        if self._running or self._stopped:
            return
        self._running = True
        self._schedule()

    def tick(self) -> bool:
        """Advance one second. Returns False when the timer is not ticking."""
        if not self.ticking:
            return False

        self.state.time_left -= 1
        if self._on_tick:
            self._on_tick(self.state.time_left)

        if self.state.time_left <= 0:
            self.state.time_left = 0
            self.state.is_expired = True
            self._cancel()
            logger.info("Session timer expired")
            self._on_expire()
        return True

    def pause(self) -> None:
        if self._stopped or self.state.is_expired or self.state.is_paused:
            return
        self.state.is_paused = True
        self._cancel()

    def resume(self) -> None:
        if self._stopped or self.state.is_expired or not self.state.is_paused:
            return
        self.state.is_paused = False
        if self._running:
            self._schedule()

    def stop(self) -> None:
        """Cancel scheduling for good. Called when the session completes."""
        self._stopped = True
        self._cancel()

    def _schedule(self) -> None:
        self._cancel()
        self._handle = self._scheduler.call_later(TICK_SECONDS, self._on_scheduled_tick, name="timer-tick")

    def _on_scheduled_tick(self) -> None:
        self._handle = None
        if self.tick() and self.ticking:
            self._schedule()

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
