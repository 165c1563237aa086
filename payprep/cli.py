"""
payprep CLI.

Terminal front end for the practice engine. State lives in the data
directory between invocations, so an attempt started with `payprep start`
can be answered, flagged and submitted by later commands.

Usage:
    payprep packs
    payprep start --mode study
    payprep show
    payprep answer 2
    payprep submit
    payprep retake --status incorrect
"""

from __future__ import annotations

import sys
from typing import Any

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from config import get_settings
from payprep.attempt.report import build_report
from payprep.attempt.results import ScoredAttempt
from payprep.attempt.state import RETAKE_STATUSES, AttemptState
from payprep.content.loader import ContentLibrary
from payprep.core.exceptions import PayPrepError
from payprep.core.models import DOMAIN_NAMES, Question, QuestionType
from payprep.core.settings import MODE_CONFIG, PracticeMode, mode_config
from payprep.scoring import format_answer
from payprep.session import PracticeSession
from payprep.storage import JsonFileStore, PrepStorage

app = typer.Typer(
    help="payprep: seeded practice exams for payroll certification",
    no_args_is_help=True,
)

console = Console()


def configure_logging(level: str | None = None) -> None:
    settings = get_settings()
    logger.remove()
    logger.add(sys.stderr, level=level or settings.log_level, format="<level>{message}</level>")
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="1 MB")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show engine logs"),
):
    """Payroll certification practice engine."""
    configure_logging("DEBUG" if verbose else None)


# ========================================
# Context Builder
# ========================================


class CLIContext:
    """Lazily builds storage, content and the session from settings."""

    def __init__(self):
        self.settings = get_settings()
        self._storage: PrepStorage | None = None
        self._library: ContentLibrary | None = None
        self._session: PracticeSession | None = None

    @property
    def storage(self) -> PrepStorage:
        if self._storage is None:
            self._storage = PrepStorage(
                JsonFileStore(self.settings.data_dir),
                history_limit=self.settings.history_limit,
            )
            self._storage.migrate_if_needed()
        return self._storage

    @property
    def library(self) -> ContentLibrary:
        if self._library is None:
            self._library = ContentLibrary.load(self.settings.content_dir)
        return self._library

    @property
    def session(self) -> PracticeSession:
        if self._session is None:
            self._session = PracticeSession(self.library, self.storage, self.settings)
        return self._session

    def active_session(self) -> PracticeSession:
        session = self.session
        if session.resume() is None:
            console.print("[yellow]No attempt in progress. Run 'payprep start' first.[/yellow]")
            raise typer.Exit(code=1)
        return session


def _fail(error: Exception) -> None:
    console.print(f"[red]Error: {escape(str(error))}[/red]")
    raise typer.Exit(code=1)


# ========================================
# Rendering
# ========================================


def render_question(attempt: AttemptState) -> None:
    question = attempt.current_question
    if question is None:
        console.print("[yellow]This attempt has no questions.[/yellow]")
        return

    position = f"{attempt.current_index + 1}/{len(attempt.questions)}"
    flagged = " [magenta]⚑ flagged[/magenta]" if attempt.flags.get(question.id) else ""
    title = f"Q{position} · {question.domain_name or '-'} · {question.difficulty} · {question.type}{flagged}"

    body = [escape(question.prompt)]
    if question.choices:
        body += [f"  {i}. {escape(choice)}" for i, choice in enumerate(question.choices, 1)]
    if question.items:
        body += [f"  {i}. {escape(item)}" for i, item in enumerate(question.items, 1)]
    if question.left and question.right:
        body.append("")
        body += [f"  {i}. {escape(left)}" for i, left in enumerate(question.left, 1)]
        body.append("  match with:")
        body += [f"  {i}. {escape(right)}" for i, right in enumerate(question.right, 1)]
    if question.unit_hint:
        body.append(f"[dim]Unit: {escape(question.unit_hint)}[/dim]")

    response = attempt.responses.get(question.id)
    if response is not None:
        body.append(f"\n[cyan]Your answer:[/cyan] {escape(format_answer(question, response))}")

    remaining = attempt.remaining_seconds()
    subtitle = f"{remaining // 60}:{remaining % 60:02d} left" if remaining is not None else None
    console.print(Panel("\n".join(body), title=title, subtitle=subtitle, border_style="cyan"))


def _split(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def _indexes(raw: str) -> list[int]:
    try:
        return [int(part) - 1 for part in _split(raw)]
    except ValueError as e:
        raise PayPrepError(f"Expected comma-separated numbers, got {raw!r}") from e


def parse_response(question: Question, raw: str) -> Any:
    """
    Convert command-line text into a response of the question's shape.

    Choices, items and match targets are numbered from 1 on screen.
    """
    question_type = question.type
    if question_type == QuestionType.SINGLE_CHOICE.value:
        indexes = _indexes(raw)
        if len(indexes) != 1:
            raise PayPrepError("Single-choice questions take exactly one choice number.")
        return indexes[0]
    if question_type in (
        QuestionType.MULTI_CHOICE.value,
        QuestionType.ORDERING.value,
        QuestionType.MATCHING.value,
    ):
        return _indexes(raw)
    if question_type == QuestionType.MULTI_NUMERIC.value:
        return _split(raw)
    return raw


def render_summary(scored: ScoredAttempt) -> None:
    summary = scored.summary
    verdict = "[green]PASS[/green]" if summary.passed else "[red]FAIL[/red]"
    console.print(
        Panel(
            f"Score: [bold]{summary.score_percent}%[/bold]  {verdict}\n"
            f"Earned {summary.total_earned:g} of {summary.question_count} · "
            f"time used {summary.time_used}s",
            title=f"{mode_config(summary.mode).label} result",
            border_style="green" if summary.passed else "red",
        )
    )
    for dimension, rows in scored.breakdowns.items():
        table = Table(title=f"By {dimension}", show_header=True)
        table.add_column("Label")
        table.add_column("Correct", justify="right")
        table.add_column("Total", justify="right")
        table.add_column("%", justify="right")
        for row in rows:
            table.add_row(row.label, str(row.correct), str(row.total), f"{row.percent}%")
        console.print(table)


# ========================================
# Commands
# ========================================


@app.command("packs")
def list_packs(
    enable: list[str] = typer.Option(None, "--enable", "-e", help="Enable a pack by id"),
    disable: list[str] = typer.Option(None, "--disable", "-d", help="Disable a pack by id"),
    fun: bool | None = typer.Option(None, "--fun/--no-fun", help="Include fun-only questions"),
    partial: bool | None = typer.Option(None, "--partial/--no-partial", help="Award partial credit"),
):
    """List content packs and update which ones are enabled."""
    ctx = CLIContext()
    try:
        library = ctx.library
    except PayPrepError as e:
        _fail(e)
    prefs = ctx.storage.load_settings()

    enabled = list(prefs.enabled_packs)
    for pack_id in enable or []:
        if pack_id not in library.packs:
            _fail(PayPrepError(f"Unknown pack: {pack_id}"))
        if pack_id not in enabled:
            enabled.append(pack_id)
    enabled = [p for p in enabled if p not in set(disable or [])]

    changed = enabled != prefs.enabled_packs or fun is not None or partial is not None
    prefs.enabled_packs = enabled
    if fun is not None:
        prefs.fun_mode = fun
    if partial is not None:
        prefs.partial_credit = partial
    if changed:
        ctx.storage.save_settings(prefs)

    table = Table(title="Content packs")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Questions", justify="right")
    table.add_column("Enabled", justify="center")
    for row in library.index:
        pack = library.packs.get(row.id)
        count = str(len(pack.questions)) if pack else "[red]unreadable[/red]"
        table.add_row(row.id, row.name, count, "✓" if row.id in prefs.enabled_packs else "")
    console.print(table)
    console.print(f"Fun mode: {'on' if prefs.fun_mode else 'off'} · Partial credit: {'on' if prefs.partial_credit else 'off'}")


@app.command("start")
def start_attempt(
    mode: PracticeMode = typer.Option(PracticeMode.TIMED, "--mode", "-m", help="Practice mode"),
    domain: list[int] = typer.Option(None, "--domain", "-d", help="Domain id for domain focus (repeatable)"),
    seed: str | None = typer.Option(None, "--seed", help="Fixed seed to reproduce an attempt"),
):
    """Start a new attempt."""
    domains = list(domain or [])
    unknown = [d for d in domains if d not in DOMAIN_NAMES]
    if unknown:
        _fail(PayPrepError(f"Unknown domain(s): {unknown}; expected {sorted(DOMAIN_NAMES)}"))
    if mode == PracticeMode.DOMAIN and not domains:
        _fail(PayPrepError("Domain focus needs at least one --domain."))

    ctx = CLIContext()
    try:
        attempt = ctx.session.start(mode, domain_selection=domains, seed=seed)
    except PayPrepError as e:
        _fail(e)

    console.print(
        f"[bold cyan]{MODE_CONFIG[mode].label}[/bold cyan] · {len(attempt.questions)} questions · "
        f"seed [dim]{attempt.seed}[/dim]"
    )
    render_question(attempt)


@app.command("show")
def show_question(
    number: int | None = typer.Argument(None, help="Question number to jump to"),
):
    """Show the current question (or jump to one)."""
    session = CLIContext().active_session()
    if number is not None:
        session.go_to(number - 1)
    render_question(session.attempt)


@app.command("answer")
def answer_question(
    response: str = typer.Argument(..., help="Choice number(s), value(s) or text; lists are comma-separated"),
    elapsed: int = typer.Option(0, "--elapsed", "-t", help="Seconds spent on this question"),
    stay: bool = typer.Option(False, "--stay", help="Do not advance to the next question"),
):
    """Answer the current question."""
    session = CLIContext().active_session()
    attempt = session.attempt
    question = attempt.current_question

    for _ in range(max(elapsed, 0)):
        scored = session.tick()
        if scored is not None:
            console.print("[red]Time is up; the attempt was submitted.[/red]")
            render_summary(scored)
            return

    try:
        feedback = session.answer(parse_response(question, response))
    except PayPrepError as e:
        _fail(e)

    if feedback is not None:
        if feedback.correct:
            console.print("[green]✓ Correct[/green]")
        elif feedback.earned > 0:
            console.print(f"[yellow]~ Partially correct ({feedback.earned:.0%})[/yellow]")
        else:
            expected = question.correct_order if question.type == QuestionType.ORDERING.value else question.answer
            console.print(f"[red]✗ Incorrect[/red] · answer: {escape(format_answer(question, expected))}")
        if question.explanation:
            console.print(f"[dim]{escape(question.explanation)}[/dim]")
        for step in question.steps or []:
            console.print(f"  [dim]• {escape(step)}[/dim]")

    if not stay:
        session.next()
        if attempt.mode == PracticeMode.DRILLS.value:
            console.print(f"Streak: {attempt.streak} (best {attempt.best_streak})")
        render_question(attempt)


@app.command("flag")
def flag_question(
    number: int | None = typer.Argument(None, help="Question number (default: current)"),
):
    """Toggle the review flag on a question."""
    session = CLIContext().active_session()
    attempt = session.attempt
    if number is not None:
        if not 1 <= number <= len(attempt.questions):
            _fail(PayPrepError(f"No question {number}"))
        question_id = attempt.questions[number - 1].id
    else:
        question_id = attempt.current_question.id
    flagged = session.toggle_flag(question_id)
    console.print("[magenta]Flagged[/magenta]" if flagged else "Flag removed")


@app.command("hint")
def show_hint(
    number: int | None = typer.Argument(None, help="Question number (default: current)"),
):
    """Show the worked steps for a question (feedback modes only)."""
    session = CLIContext().active_session()
    attempt = session.attempt
    question_id = None
    if number is not None:
        if not 1 <= number <= len(attempt.questions):
            _fail(PayPrepError(f"No question {number}"))
        question_id = attempt.questions[number - 1].id
    try:
        steps = session.hint(question_id)
    except PayPrepError as e:
        _fail(e)
    for step in steps:
        console.print(f"  [cyan]•[/cyan] {escape(step)}")


@app.command("submit")
def submit_attempt(
    review: str | None = typer.Option(None, "--review", "-r", help="Review filter: correct, incorrect, flagged"),
):
    """Score the attempt in progress and record it in history."""
    session = CLIContext().active_session()
    unanswered = len(session.attempt.questions) - session.attempt.answered_count
    if unanswered:
        console.print(f"[yellow]{unanswered} question(s) unanswered[/yellow]")
    scored = session.submit()
    render_summary(scored)
    if review:
        _render_review(scored, review)


@app.command("review")
def review_attempt(
    status: str | None = typer.Option(None, "--status", "-s", help="correct, incorrect or flagged"),
):
    """Review the last submitted attempt."""
    scored = CLIContext().storage.load_last_result()
    if scored is None:
        console.print("[yellow]No submitted attempt yet.[/yellow]")
        raise typer.Exit(code=1)
    render_summary(scored)
    _render_review(scored, status)


def _render_review(scored: ScoredAttempt, status: str | None) -> None:
    if status is not None and status not in RETAKE_STATUSES:
        _fail(PayPrepError(f"Unknown status {status!r}; expected one of {', '.join(RETAKE_STATUSES)}"))
    report = build_report(scored, status)
    for number, item in enumerate(report["review"], 1):
        mark = "[green]✓[/green]" if item["correct"] else "[red]✗[/red]"
        console.print(f"\n{mark} [bold]{number}.[/bold] {escape(str(item['prompt']))}")
        console.print(f"   Your answer: {escape(str(item['your_answer']))}")
        console.print(f"   Correct answer: {escape(str(item['correct_answer']))}")
        if item["explanation"]:
            console.print(f"   [dim]{escape(str(item['explanation']))}[/dim]")


@app.command("history")
def show_history():
    """List recent attempt summaries."""
    history = CLIContext().storage.load_history()
    if not history:
        console.print("[dim]No attempts yet.[/dim]")
        return
    table = Table(title="Recent attempts")
    table.add_column("Date")
    table.add_column("Mode")
    table.add_column("Score", justify="right")
    table.add_column("Result")
    table.add_column("Questions", justify="right")
    for summary in history:
        table.add_row(
            (summary.date or "-")[:16].replace("T", " "),
            summary.mode,
            f"{summary.score_percent}%",
            "[green]pass[/green]" if summary.passed else "[red]fail[/red]",
            str(summary.question_count),
        )
    console.print(table)


@app.command("weakness")
def show_weakness():
    """Show the current weakness profile."""
    profile = CLIContext().storage.load_weakness()
    if profile is None or profile.is_empty:
        console.print("[dim]No weakness profile yet. Submit an attempt first.[/dim]")
        return
    table = Table(title="Weak areas (worst first)")
    table.add_column("Dimension")
    table.add_column("Area")
    table.add_column("Boost", justify="right")
    for spot in profile.domains:
        table.add_row("domain", DOMAIN_NAMES.get(int(spot.id), str(spot.id)), f"{spot.weight:.2f}")
    for spot in profile.types:
        table.add_row("type", str(spot.id), f"{spot.weight:.2f}")
    for spot in profile.difficulties:
        table.add_row("difficulty", str(spot.id), f"{spot.weight:.2f}")
    console.print(table)


@app.command("retake")
def retake_attempt(
    status: str = typer.Option("incorrect", "--status", "-s", help="incorrect, correct or flagged"),
):
    """Start a new attempt from questions of the last submitted one."""
    if status not in RETAKE_STATUSES:
        _fail(PayPrepError(f"Unknown status {status!r}; expected one of {', '.join(RETAKE_STATUSES)}"))
    ctx = CLIContext()
    try:
        attempt = ctx.session.retake(status)
    except PayPrepError as e:
        _fail(e)
    console.print(f"[bold cyan]Retake[/bold cyan] · {len(attempt.questions)} {status} questions")
    render_question(attempt)


@app.command("reset")
def reset_state(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete settings, the current attempt, history and the weakness profile."""
    if not yes and not typer.confirm("Delete all stored payprep data?"):
        raise typer.Exit()
    CLIContext().storage.clear_all()
    console.print("Stored data cleared.")


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
