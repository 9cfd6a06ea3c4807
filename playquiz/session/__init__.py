"""
Session runtime: scheduler, timer, state types and the controller.
"""

from .controller import SessionController
from .options import SessionOptions
from .scheduler import Clock, RealClock, ScheduledTask, Scheduler
from .state import CompletionReason, SessionReport, SessionSnapshot, SessionState, TypeTally
from .timer import TimerCoordinator, TimerState

__all__ = [
    "Clock",
    "CompletionReason",
    "RealClock",
    "ScheduledTask",
    "Scheduler",
    "SessionController",
    "SessionOptions",
    "SessionReport",
    "SessionSnapshot",
    "SessionState",
    "TimerCoordinator",
    "TimerState",
    "TypeTally",
]
