"""
Typer CLI for playquiz.

Commands:
    playquiz play BANK.json       - Run a timed quiz session in the terminal
    playquiz validate BANK.json   - Check a question bank and list its questions
    playquiz accuracy EXP REC     - Score a recognized word against the expected one

Usage:
    playquiz --help
    playquiz play quiz.json --duration 90
    playquiz play reading.json --seed 7
    playquiz accuracy drinks drink
"""

from __future__ import annotations

import json
import sys
import time
from pathlib import Path

import typer
from loguru import logger
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from config import Settings, get_settings
from playquiz.errors import InvalidQuestionBankError
from playquiz.questions import QuestionType, load_question_bank
from playquiz.scoring import match
from playquiz.session import (
    RealClock,
    Scheduler,
    SessionController,
    SessionOptions,
    SessionReport,
    SessionState,
)
from playquiz.speech import HttpSpeechRecognizer, SpeechRecognizer, UnavailableRecognizer

app = typer.Typer(
    help="playquiz: timed quiz sessions with retries, hints and reading practice",
    no_args_is_help=True,
)

console = Console()

HELP_COMMAND = "h"
SKIP_COMMAND = "s"
RESHUFFLE_COMMAND = "r"
QUIT_COMMAND = "q"
RECORDING_PREFIX = "@"

# Formats where a number typed at the prompt selects one of the shown choices
PICK_BY_NUMBER = {QuestionType.MULTIPLE_CHOICE.value, QuestionType.COMPARISON.value, QuestionType.FILL_IN_BLANK.value}

INSTRUCTIONS = {
    QuestionType.MULTIPLE_CHOICE.value: "Pick the right answer. Type its number or the answer itself.",
    QuestionType.COMPARISON.value: "Pick <, = or > to make the comparison true.",
    QuestionType.FILL_IN_BLANK.value: "Type the missing word.",
    QuestionType.SENTENCE_SORT.value: "Type the words in the right order.",
    QuestionType.NUMBER_SORT.value: "Type the numbers in order, separated by spaces or commas.",
    QuestionType.MISSING_NUMBER.value: "Type the missing numbers, separated by commas.",
    QuestionType.ARITHMETIC.value: "Type the missing number.",
    QuestionType.READING.value: "Read the word aloud and type what you said (or @file to send a recording).",
}


@app.callback()
def main_callback():
    """Configure logging once for every command."""
    configure_logging(get_settings())


def configure_logging(settings: Settings) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="1 MB", retention=3)


# ========================================
# Commands
# ========================================


@app.command("play")
def play(
    bank: Path = typer.Argument(..., help="Question bank JSON file"),
    duration: int = typer.Option(None, "--duration", "-d", min=1, help="Session length in seconds"),
    seed: int = typer.Option(None, "--seed", help="Seed for shuffling presented tokens"),
):
    """
    Run a timed quiz session.

    During a question: h = help (pauses the timer), s = skip,
    r = reshuffle the words or numbers to sort, q = end now.
    """
    settings = get_settings()
    questions = _load_or_exit(bank)

    options = SessionOptions.from_settings(settings)
    if seed is not None:
        options.shuffle_seed = seed

    scheduler = Scheduler(RealClock())
    recognizer = _build_recognizer(settings)
    controller = SessionController(
        questions,
        scheduler=scheduler,
        options=options,
        duration_s=duration,
        recognizer=recognizer,
    )

    try:
        _render_instructions(controller)
        if not controller.start():
            console.print(f"[red]{controller.notice}[/red]")
            raise typer.Exit(1)

        try:
            _run_session(controller, scheduler)
        except KeyboardInterrupt:
            controller.force_end()
    finally:
        if isinstance(recognizer, HttpSpeechRecognizer):
            recognizer.close()

    _render_report(controller.report)


@app.command("validate")
def validate(bank: Path = typer.Argument(..., help="Question bank JSON file")):
    """Load a question bank and list its questions."""
    questions = _load_or_exit(bank)

    table = Table(title=f"{bank.name}: {len(questions)} questions", box=box.ROUNDED)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Prompt")
    table.add_column("Missed as", style="dim")

    for i, question in enumerate(questions, start=1):
        table.add_row(str(i), question.type, question.prompt, question.canonical)

    console.print(table)


@app.command("accuracy")
def accuracy(
    expected: str = typer.Argument(..., help="Word the player should say"),
    recognized: str = typer.Argument(..., help="What was recognized"),
):
    """Score a recognition with the reading-format accuracy matcher."""
    result = match(expected, recognized)
    verdict = "[green]PASS[/green]" if result.passed else "[red]FAIL[/red]"
    console.print(
        f"{result.expected!r} vs {result.recognized!r}: "
        f"[bold]{result.percentage:.2f}%[/bold] (distance {result.distance}) {verdict}"
    )


# ========================================
# Session loop
# ========================================


def _load_or_exit(bank: Path):
    if not bank.exists():
        console.print(f"[red]Error: Question bank not found: {bank}[/red]")
        raise typer.Exit(1)
    try:
        return load_question_bank(bank)
    except InvalidQuestionBankError as e:
        console.print(f"[red]Error: {e}[/red]")
        for message in e.errors:
            console.print(f"  [red]-[/red] {message}")
        raise typer.Exit(1)


def _build_recognizer(settings: Settings) -> SpeechRecognizer:
    if settings.has_speech_configured():
        return HttpSpeechRecognizer.from_settings(settings)
    return UnavailableRecognizer()


def _wait_for_next_task(scheduler: Scheduler) -> None:
    """Sleep until the next scheduled task is due, then run it."""
    due = scheduler.next_due()
    if due is not None:
        time.sleep(max(0.0, due - scheduler.now()))
    scheduler.run_pending()


def _run_session(controller: SessionController, scheduler: Scheduler) -> None:
    shown_countdown = None

    while controller.state != SessionState.COMPLETED:
        scheduler.run_pending()
        snapshot = controller.snapshot()

        if snapshot.state == SessionState.COUNTDOWN:
            if snapshot.countdown != shown_countdown:
                console.print(f"[bold yellow]{snapshot.countdown}...[/bold yellow]")
                shown_countdown = snapshot.countdown
            _wait_for_next_task(scheduler)
            continue

        if snapshot.advance_pending:
            _wait_for_next_task(scheduler)
            continue

        if snapshot.state == SessionState.PAUSED:
            console.print(Panel(snapshot.help_text or "", title="Help", border_style="yellow", box=box.ROUNDED))
            _ask("[dim]Press Enter to continue[/dim]")
            controller.close_help()
            continue

        _render_question(snapshot)
        raw = _ask("[cyan]>_ ANSWER[/cyan]")
        scheduler.run_pending()

        if controller.state == SessionState.COMPLETED:
            console.print("[bold red]Time's up![/bold red]")
            break
        if raw is None or raw == QUIT_COMMAND:
            controller.force_end()
            break
        if raw == HELP_COMMAND:
            controller.open_help()
            continue
        if raw == SKIP_COMMAND:
            controller.skip()
            continue
        if raw == RESHUFFLE_COMMAND:
            if not controller.reshuffle():
                console.print("[dim]Nothing to reshuffle here.[/dim]")
            continue

        if raw.startswith(RECORDING_PREFIX):
            verdict = _submit_recording(controller, Path(raw[len(RECORDING_PREFIX):].strip()))
        else:
            verdict = controller.submit(_resolve_answer(snapshot, raw))

        after = controller.snapshot()
        if verdict is not None:
            style = "green" if verdict.correct else "yellow" if verdict.incomplete else "red"
            console.print(f"[{style}]{verdict.feedback}[/{style}]")
        if after.notice:
            console.print(f"[yellow]{after.notice}[/yellow]")


def _submit_recording(controller: SessionController, path: Path):
    try:
        audio = path.read_bytes()
    except OSError as e:
        console.print(f"[red]Cannot read recording {path}: {e}[/red]")
        return None
    return controller.submit_recording(audio)


def _ask(prompt: str) -> str | None:
    try:
        return Prompt.ask(prompt, default="", show_default=False).strip()
    except EOFError:
        return None


def _resolve_answer(snapshot, raw: str) -> str:
    """Map a typed choice number onto the presented choice."""
    if snapshot.question_type in PICK_BY_NUMBER and raw.isdigit():
        pick = int(raw)
        if 1 <= pick <= len(snapshot.choices):
            return snapshot.choices[pick - 1]
    return raw


# ========================================
# Rendering
# ========================================


def _render_instructions(controller: SessionController) -> None:
    types = sorted({q.type for q in controller.questions})
    lines = [INSTRUCTIONS.get(t, "") for t in types]
    lines.append("")
    lines.append(
        f"{controller.total_questions} questions, {controller.time_left} seconds. "
        f"[cyan]{HELP_COMMAND}[/cyan] = help, [cyan]{SKIP_COMMAND}[/cyan] = skip, "
        f"[cyan]{RESHUFFLE_COMMAND}[/cyan] = reshuffle, [cyan]{QUIT_COMMAND}[/cyan] = end"
    )
    if not controller.synthesizer.available:
        lines.append("[dim]Sound is off: prompts and feedback are shown as text only.[/dim]")
    console.print(Panel("\n".join(lines), title="How to play", border_style="cyan", box=box.ROUNDED))


def _render_question(snapshot) -> None:
    body = f"[bold]{snapshot.prompt}[/bold]"
    if snapshot.choices:
        if snapshot.question_type in PICK_BY_NUMBER:
            body += "\n\n" + "\n".join(f"  {i}. {c}" for i, c in enumerate(snapshot.choices, start=1))
        else:
            body += "\n\n  " + "  ".join(snapshot.choices)

    retry = " [red](retry)[/red]" if snapshot.has_failed_once else ""
    title = f"Question {snapshot.index + 1}/{snapshot.total_questions}{retry}"
    subtitle = f"Score {snapshot.score} | {snapshot.time_left}s left"
    console.print(Panel(body, title=title, subtitle=subtitle, border_style="cyan", box=box.ROUNDED))


def _render_report(report: SessionReport | None) -> None:
    if report is None:
        return

    table = Table(title="Session Report", box=box.ROUNDED)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Score", f"{report.score}/{report.total_questions}")
    table.add_row("Score %", report.score_percent_text)
    table.add_row("Missed", str(len(json.loads(report.missed_questions))))
    table.add_row("Ended by", report.reason.value)
    table.add_row("Answered", str(report.questions_answered))
    table.add_row("Time spent", f"{report.time_spent}s")
    table.add_row("Started", report.started_on)
    table.add_row("Completed", report.completed_on)
    console.print(table)

    if report.question_type_breakdown:
        breakdown = Table(title="By question type", box=box.ROUNDED)
        breakdown.add_column("Type", style="cyan")
        breakdown.add_column("Correct", justify="right")
        for question_type, tally in report.question_type_breakdown.items():
            breakdown.add_row(question_type, f"{tally.correct}/{tally.total}")
        console.print(breakdown)

    console.print_json(json.dumps(report.to_dict()))


def run() -> None:
    """Console-script entry point."""
    app()


if __name__ == "__main__":
    run()
