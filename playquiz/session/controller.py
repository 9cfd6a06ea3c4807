"""
Session controller: one generic state machine for every question format.

Lifecycle:
    INSTRUCTIONS -> COUNTDOWN -> ACTIVE <-> PAUSED -> COMPLETED

The controller never inspects format-specific fields. Correctness comes from
the verifier registered for each question's type; remediation comes from
that verifier's retry policy. All delayed work (countdown steps, timer
ticks, the advance after a correct answer) is a cancellable task on the
injected Scheduler, and every path into COMPLETED cancels what is pending.

Commands that are illegal in the current state are ignored.
"""

from __future__ import annotations

import random
from collections import Counter
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

from loguru import logger

from playquiz.errors import SpeechRecognitionError, SpeechUnavailableError
from playquiz.questions import get_verifier
from playquiz.questions.base import Verdict, Verifier
from playquiz.scoring import MissedQuestionLog, ScoreLedger
from playquiz.speech import SilentSynthesizer, SpeechRecognizer, SpeechSynthesizer

from .options import SessionOptions
from .scheduler import ScheduledTask, Scheduler
from .state import Attempt, CompletionReason, SessionReport, SessionSnapshot, SessionState, TypeTally
from .timer import TimerCoordinator

CANNOT_VERIFY = "Speech recognition is not available, so this answer cannot be checked. Ask for help or skip."
NOT_HEARD = "I couldn't hear you. Please try again."
NO_MORE_HINTS = "No more hints for this question."
MOVING_ON = "Let's move on to the next one."
EMPTY_BANK = "This quiz has no questions."

COUNTDOWN_STEP_S = 1.0


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionController:
    """
    Drives one timed run through an ordered question sequence.

    The host issues commands (start, submit, open_help, close_help, skip,
    reshuffle, force_end), pumps the scheduler, and re-renders from
    snapshot() whenever on_change fires. on_complete receives the
    SessionReport exactly once. Prompts and feedback are passed to the
    injected synthesizer as they appear.
    """

    def __init__(
        self,
        questions: Sequence[Any],
        *,
        scheduler: Scheduler,
        options: SessionOptions | None = None,
        duration_s: int | None = None,
        recognizer: SpeechRecognizer | None = None,
        synthesizer: SpeechSynthesizer | None = None,
        rng: random.Random | None = None,
        on_change: Callable[[SessionSnapshot], None] | None = None,
        on_complete: Callable[[SessionReport], None] | None = None,
        now: Callable[[], datetime] = _utc_now,
    ):
        if duration_s is not None and duration_s <= 0:
            raise ValueError("duration_s must be > 0")

        self.questions = list(questions)
        self.scheduler = scheduler
        self.options = options or SessionOptions()
        self.recognizer = recognizer
        self.synthesizer = synthesizer or SilentSynthesizer()
        self.rng = rng or random.Random(self.options.shuffle_seed)
        self.on_change = on_change
        self.on_complete = on_complete

        self._now = now
        self.started_on = now().isoformat()
        self.duration_s = duration_s
        self.ledger = ScoreLedger(len(self.questions))
        self.missed = MissedQuestionLog()
        self.timer: TimerCoordinator | None = None
        self.answered = 0
        self._credited_by_type: Counter[str] = Counter()

        self.state = SessionState.INSTRUCTIONS
        self.index = 0
        self.countdown: int | None = None
        self.report: SessionReport | None = None
        self.exit_requested = False

        # Per-question presentation state, reset by _present()
        self.failures = 0
        self.last_correct: bool | None = None
        self.feedback: str | None = None
        self.help_text: str | None = None
        self.notice: str | None = None
        self._help_requests = 0
        self._choices: tuple[str, ...] = ()

        self._countdown_task: ScheduledTask | None = None
        self._advance_task: ScheduledTask | None = None

    # ========================================
    # Read access
    # ========================================

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def score(self) -> int:
        return self.ledger.score

    @property
    def time_left(self) -> int:
        if self.timer is not None:
            return self.timer.time_left
        return self.duration_s or self.options.duration_for(self.questions)

    @property
    def current_question(self) -> Any | None:
        if not self.questions:
            return None
        return self.questions[self.index]

    @property
    def advance_pending(self) -> bool:
        return self._advance_task is not None and self._advance_task.active

    @property
    def choices(self) -> tuple[str, ...]:
        return self._choices

    def snapshot(self) -> SessionSnapshot:
        question = self.current_question
        return SessionSnapshot(
            state=self.state,
            index=self.index,
            total_questions=self.total_questions,
            time_left=self.time_left,
            score=self.score,
            has_failed_once=self.ledger.has_failed_once(self.index) if question is not None else False,
            last_correct=self.last_correct,
            prompt=question.prompt if question is not None else "",
            choices=self._choices,
            question_type=question.type if question is not None else None,
            countdown=self.countdown,
            feedback=self.feedback,
            help_text=self.help_text,
            notice=self.notice,
            failures=self.failures,
            advance_pending=self.advance_pending,
            exit_requested=self.exit_requested,
        )

    # ========================================
    # Commands
    # ========================================

    def start(self, duration_s: int | None = None) -> bool:
        """
        Leave INSTRUCTIONS and begin the countdown.

        Returns False if the session cannot run (empty bank or a question
        with no registered verifier); exit_requested is then set so the
        host can return to its selection screen.
        """
        if self.state != SessionState.INSTRUCTIONS:
            logger.debug(f"start() ignored in state {self.state.value}")
            return False

        problem = self._check_bank()
        if problem:
            logger.warning(f"Refusing to start session: {problem}")
            self.exit_requested = True
            self.notice = problem
            self._notify()
            return False

        duration = duration_s or self.duration_s or self.options.duration_for(self.questions)
        self.duration_s = duration
        self.ledger.reset()
        self.timer = TimerCoordinator(
            self.scheduler,
            duration,
            on_expire=self._on_timeout,
            on_tick=self._on_tick,
        )

        logger.info(f"Session starting: {self.total_questions} questions, {duration}s")
        self.state = SessionState.COUNTDOWN
        self.countdown = self.options.countdown_seconds
        if self.countdown <= 0:
            self._activate()
        else:
            self._countdown_task = self.scheduler.call_later(
                COUNTDOWN_STEP_S, self._countdown_step, name="countdown"
            )
            self._notify()
        return True

    def submit(self, answer: Any) -> Verdict | None:
        """
        Check an answer for the current question.

        Returns the verdict, or None when the submission was ignored
        (not ACTIVE, or an advance is already pending).
        """
        if self.state != SessionState.ACTIVE or self.advance_pending:
            logger.debug(f"submit() ignored in state {self.state.value}")
            return None

        attempt = Attempt(answer=answer, submitted_at=self.scheduler.now())
        question = self.questions[self.index]
        verifier = self._verifier(question)
        verdict = verifier.check(question, attempt.answer)

        self.feedback = verdict.feedback
        self.notice = None
        self._speak(verdict.feedback)

        if verdict.incomplete:
            self._notify()
            return verdict

        credited = self.ledger.record(self.index, verdict.correct)
        self.last_correct = verdict.correct

        if verdict.correct:
            logger.debug(f"Question {self.index} solved (credited={credited})")
            if credited:
                self._credited_by_type[question.type] += 1
            self.answered += 1
            self._schedule_advance()
        else:
            self._on_wrong(question, verifier)

        self._notify()
        return verdict

    def submit_recording(self, audio: bytes) -> Verdict | None:
        """Transcribe a recording with the injected recognizer, then submit it."""
        if self.state != SessionState.ACTIVE or self.advance_pending:
            logger.debug(f"submit_recording() ignored in state {self.state.value}")
            return None

        if self.recognizer is None or not self.recognizer.available:
            self.notice = CANNOT_VERIFY
            self._notify()
            return None

        try:
            transcript = self.recognizer.transcribe(audio)
        except SpeechUnavailableError as e:
            logger.warning(f"Speech recognition unavailable: {e}")
            self.notice = CANNOT_VERIFY
            self._notify()
            return None
        except SpeechRecognitionError as e:
            logger.warning(f"Speech recognition failed: {e}")
            self.notice = NOT_HEARD
            self._notify()
            return None

        return self.submit(transcript)

    def open_help(self) -> str | None:
        """Pause the timer and show the next hint for the current question."""
        if self.state != SessionState.ACTIVE or self.advance_pending:
            logger.debug(f"open_help() ignored in state {self.state.value}")
            return None

        self.state = SessionState.PAUSED
        self.timer.pause()
        self._help_requests += 1
        self.help_text = self._next_hint()
        self._notify()
        return self.help_text

    def close_help(self) -> None:
        if self.state != SessionState.PAUSED:
            logger.debug(f"close_help() ignored in state {self.state.value}")
            return

        self.state = SessionState.ACTIVE
        self.help_text = None
        self.timer.resume()
        self._notify()

    def skip(self) -> None:
        """Give up on the current question: no credit, recorded as missed."""
        if self.state not in (SessionState.ACTIVE, SessionState.PAUSED) or self.advance_pending:
            logger.debug(f"skip() ignored in state {self.state.value}")
            return

        if self.state == SessionState.PAUSED:
            self.state = SessionState.ACTIVE
            self.help_text = None
            self.timer.resume()

        question = self.questions[self.index]
        self.ledger.record(self.index, False)
        self.missed.record(question.canonical)
        self.answered += 1
        logger.info(f"Question {self.index} skipped")
        self._advance()

    def reshuffle(self) -> bool:
        """
        Re-draw the presented tokens of a sorting question on request.

        Scoring is untouched. Returns False when ignored (not ACTIVE, an
        advance is pending, or the format has nothing to shuffle).
        """
        if self.state != SessionState.ACTIVE or self.advance_pending:
            logger.debug(f"reshuffle() ignored in state {self.state.value}")
            return False

        question = self.questions[self.index]
        if not self._verifier(question).retry_policy.reshuffle:
            return False

        self._choices = self._shuffled(self._choices, question.answer_order())
        self._notify()
        return True

    def force_end(self) -> None:
        """End the session early; the report covers what was answered so far."""
        if self.state == SessionState.COMPLETED:
            return
        self._complete(CompletionReason.ENDED)

    # ========================================
    # Internals
    # ========================================

    def _check_bank(self) -> str | None:
        if not self.questions:
            return EMPTY_BANK
        for i, question in enumerate(self.questions):
            if get_verifier(getattr(question, "type", "")) is None:
                return f"Question {i + 1} has an unsupported type"
        return None

    def _verifier(self, question: Any) -> Verifier:
        return get_verifier(question.type)

    def _countdown_step(self) -> None:
        self._countdown_task = None
        if self.state != SessionState.COUNTDOWN:
            return

        self.countdown -= 1
        if self.countdown <= 0:
            self._activate()
            return

        self._countdown_task = self.scheduler.call_later(
            COUNTDOWN_STEP_S, self._countdown_step, name="countdown"
        )
        self._notify()

    def _activate(self) -> None:
        self.state = SessionState.ACTIVE
        self.countdown = None
        self._present(0)
        self.timer.start()
        self._notify()

    def _present(self, index: int) -> None:
        self.index = index
        self.failures = 0
        self.last_correct = None
        self.feedback = None
        self.help_text = None
        self.notice = None
        self._help_requests = 0

        question = self.questions[index]
        self._choices = question.choices()
        if self._verifier(question).retry_policy.reshuffle:
            self._choices = self._shuffled(self._choices, question.answer_order())

        self._speak(question.prompt)

    def _on_wrong(self, question: Any, verifier: Verifier) -> None:
        self.failures += 1
        if self.missed.record(question.canonical):
            logger.debug(f"Question {self.index} recorded as missed")

        policy = verifier.retry_policy
        if policy.bounded and self.failures >= self.options.reading_max_failures:
            logger.info(f"Question {self.index} failed {self.failures} times, moving on")
            self.notice = MOVING_ON
            self.answered += 1
            self._speak(MOVING_ON)
            self._schedule_advance()
        elif policy.reshuffle and self.options.reshuffle_on_retry:
            self._choices = self._shuffled(self._choices, question.answer_order())

    def _shuffled(self, tokens: tuple[str, ...], solution: tuple[str, ...] = ()) -> tuple[str, ...]:
        """
        Shuffle presented tokens.

        Avoids both the current order and the solved order whenever some
        other arrangement exists; failing that, keeps any unsolved order.
        """
        if len(set(tokens)) < 2:
            return tokens
        shuffled = list(tokens)
        for _ in range(20):
            self.rng.shuffle(shuffled)
            candidate = tuple(shuffled)
            if candidate != tokens and candidate != solution:
                return candidate
        if tokens != solution:
            return tokens
        return tuple(shuffled)

    def _speak(self, text: str) -> None:
        if text:
            self.synthesizer.speak(text)

    def _next_hint(self) -> str:
        question = self.questions[self.index]
        authored = [question.hint] if question.hint else []
        if self._help_requests <= len(authored):
            return authored[self._help_requests - 1]

        hint = self._verifier(question).hint(question, self._help_requests - len(authored))
        if hint is None:
            return NO_MORE_HINTS
        return hint

    def _schedule_advance(self) -> None:
        self._advance_task = self.scheduler.call_later(
            self.options.celebration_delay_s, self._advance, name="advance"
        )

    def _advance(self) -> None:
        self._advance_task = None
        if self.state == SessionState.COMPLETED:
            return

        if self.index >= self.total_questions - 1:
            self._complete(CompletionReason.EXHAUSTED)
            return

        self._present(self.index + 1)
        self._notify()

    def _on_tick(self, time_left: int) -> None:
        if time_left > 0:
            self._notify()

    def _on_timeout(self) -> None:
        self._complete(CompletionReason.TIMEOUT)

    def _complete(self, reason: CompletionReason) -> None:
        if self.state == SessionState.COMPLETED:
            return

        self.state = SessionState.COMPLETED
        self.countdown = None
        self.help_text = None
        if self.timer is not None:
            self.timer.stop()
        for task in (self._countdown_task, self._advance_task):
            if task is not None:
                task.cancel()
        self._countdown_task = None
        self._advance_task = None

        self.report = SessionReport(
            score=self.ledger.score,
            total_questions=self.total_questions,
            score_percent=self.ledger.score_percent(),
            missed_questions=self.missed.serialize(),
            started_on=self.started_on,
            reason=reason,
            completed_on=self._now().isoformat(),
            time_spent=self.duration_s - self.timer.time_left if self.timer is not None else 0,
            questions_answered=self.answered,
            question_type_breakdown=self._type_breakdown(),
        )
        logger.info(
            f"Session completed ({reason.value}): {self.report.score}/{self.total_questions} "
            f"({self.report.score_percent_text}%), {len(self.missed)} missed"
        )
        self._notify()
        if self.on_complete:
            self.on_complete(self.report)

    def _type_breakdown(self) -> dict[str, TypeTally]:
        totals = Counter(question.type for question in self.questions)
        return {
            question_type: TypeTally(correct=self._credited_by_type[question_type], total=total)
            for question_type, total in totals.items()
        }

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(self.snapshot())
