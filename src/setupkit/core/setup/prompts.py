"""
Interactive prompts used by the setup steps.

Steps talk to the user only through the Prompter protocol, so the same
step code runs behind a terminal (ConsolePrompter) or a fixed script of
answers (ScriptedPrompter, used for tests and unattended setups).

Answer conventions:
    - ``None`` from a select method means the user gave no answer.
    - Cancelling (Ctrl-C, end of input) raises UserAbort.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Protocol

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from setupkit.core.conflicts.models import ConflictReport
from setupkit.core.errors import UserAbort


@dataclass(frozen=True)
class Choice:
    """One selectable option."""

    value: str
    label: str


class Prompter(Protocol):
    """Abstract question/answer channel between setup steps and the user."""

    def select_one(
        self, question: str, choices: list[Choice], default: str | None = None
    ) -> str | None: ...

    def select_many(
        self, question: str, choices: list[Choice], defaults: list[str] | None = None
    ) -> list[str] | None: ...

    def inform(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def show_conflicts(self, path: Path, report: ConflictReport) -> None: ...


class ConsolePrompter:
    """Prompter backed by a rich Console and typer prompts."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def _ask(self, default: str) -> str:
        try:
            answer: str = typer.prompt("Choice", default=default, show_default=bool(default))
        except typer.Abort as e:
            raise UserAbort("Prompt cancelled") from e
        return answer.strip()

    def _list(self, question: str, choices: list[Choice], marked: Iterable[str]) -> None:
        marked = set(marked)
        self.console.print(f"\n[bold]{question}[/bold]")
        for i, choice in enumerate(choices, 1):
            suffix = " [dim](current)[/dim]" if choice.value in marked else ""
            self.console.print(f"  [cyan]{i}.[/cyan] {choice.label}{suffix}")

    @staticmethod
    def _lookup(token: str, choices: list[Choice]) -> str | None:
        if token.isdigit() and 1 <= int(token) <= len(choices):
            return choices[int(token) - 1].value
        for choice in choices:
            if token == choice.value:
                return choice.value
        return None

    def select_one(
        self, question: str, choices: list[Choice], default: str | None = None
    ) -> str | None:
        self._list(question, choices, [default] if default else [])
        while True:
            raw = self._ask(default or "")
            if not raw:
                return None
            value = self._lookup(raw, choices)
            if value is not None:
                return value
            self.console.print("[yellow]Pick a number or name from the list.[/yellow]")

    def select_many(
        self, question: str, choices: list[Choice], defaults: list[str] | None = None
    ) -> list[str] | None:
        defaults = defaults or []
        self._list(question, choices, defaults)
        self.console.print("[dim]Comma-separated numbers or names; 'none' for nothing.[/dim]")
        default_text = ",".join(
            str(i) for i, c in enumerate(choices, 1) if c.value in defaults
        )
        while True:
            raw = self._ask(default_text)
            if not raw or raw.lower() == "none":
                return []
            values = [self._lookup(token.strip(), choices) for token in raw.split(",")]
            if all(v is not None for v in values):
                picked = {v for v in values if v is not None}
                return [c.value for c in choices if c.value in picked]
            self.console.print("[yellow]Pick numbers or names from the list.[/yellow]")

    def inform(self, message: str) -> None:
        self.console.print(message)

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    def show_conflicts(self, path: Path, report: ConflictReport) -> None:
        table = Table(title=f"Conflicts in {path}", show_header=True, header_style="bold")
        table.add_column("Line", justify="right", style="cyan")
        table.add_column("Conflict")
        table.add_column("Context", style="dim")
        for conflict in report.conflicts:
            start, end = conflict.line_range
            where = str(start) if start == end else f"{start}-{end}"
            table.add_row(
                where,
                conflict.description or conflict.pattern_id,
                escape("\n".join(conflict.context)),
            )
        self.console.print(table)


ABORT = object()
"""Scripted answer that cancels the prompt."""


@dataclass
class ScriptedPrompter:
    """
    Prompter that replays a fixed list of answers.

    Each answer is consumed by the next select call. ``None`` means no
    answer, ABORT cancels, and running out of answers also cancels.

    Example:
        >>> prompter = ScriptedPrompter(["local", "merge", ["statusLine"]])
    """

    answers: deque[object] = field(default_factory=deque)
    messages: list[str] = field(default_factory=list)
    questions: list[str] = field(default_factory=list)
    reports: list[ConflictReport] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.answers = deque(self.answers)

    def _next(self, question: str) -> object:
        self.questions.append(question)
        if not self.answers:
            raise UserAbort(f"No scripted answer for: {question}")
        answer = self.answers.popleft()
        if answer is ABORT:
            raise UserAbort(f"Scripted abort at: {question}")
        return answer

    def select_one(
        self, question: str, choices: list[Choice], default: str | None = None
    ) -> str | None:
        answer = self._next(question)
        if answer is not None and answer not in [c.value for c in choices]:
            raise ValueError(f"Scripted answer {answer!r} is not one of the choices")
        return answer  # type: ignore[return-value]

    def select_many(
        self, question: str, choices: list[Choice], defaults: list[str] | None = None
    ) -> list[str] | None:
        answer = self._next(question)
        if answer is None:
            return None
        values = [c.value for c in choices]
        picked = list(answer)  # type: ignore[call-overload]
        unknown = [a for a in picked if a not in values]
        if unknown:
            raise ValueError(f"Scripted answers {unknown!r} are not among the choices")
        return picked

    def inform(self, message: str) -> None:
        self.messages.append(message)

    def warn(self, message: str) -> None:
        self.messages.append(f"warning: {message}")

    def show_conflicts(self, path: Path, report: ConflictReport) -> None:
        self.reports.append(report)
