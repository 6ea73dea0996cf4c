"""
Exit codes and error output for the setupkit CLI.

Fatal setup errors point the user at `setupkit resume`: progress up to
the last finished step is already saved.
"""

from enum import IntEnum
from typing import Optional

from rich.console import Console
from rich.markup import escape

from setupkit.core.errors import (
    ConfigReadError,
    ConfigWriteError,
    SettingsError,
    SetupkitError,
)

console = Console(stderr=True)


class ExitCode(IntEnum):
    """Standard exit codes for setupkit CLI operations."""

    SUCCESS = 0
    """Setup finished, or was already complete."""

    GENERAL_ERROR = 1
    """Generic or unexpected error."""

    USER_ERROR = 2
    """A file the user owns needs fixing before setup can continue."""

    ABORTED = 3
    """Setup stopped at a prompt; progress is saved."""

    SIGINT = 130
    """Interrupted with Ctrl+C."""


RESUME_HINT = "setupkit resume"


def print_error(
    problem: str,
    *,
    reason: Optional[str] = None,
    solution: Optional[str] = None,
) -> None:
    """
    Report an error on stderr: what failed, why, and what to do next.

    Args:
        problem: One line naming the failure
        reason: Underlying cause, shown dimmed
        solution: Next action for the user

    Example:
        >>> print_error(
        ...     "Could not write /home/me/.claude/CLAUDE.md",
        ...     reason="Permission denied",
        ...     solution="setupkit resume",
        ... )
    """
    lines = [f"[red]Error:[/red] {escape(problem)}"]
    if reason:
        lines.append(f"  [dim]{escape(reason)}[/dim]")
    if solution:
        lines.append(f"  [cyan]Next:[/cyan] {solution}")
    console.print("\n".join(lines))


def print_setup_error(error: SetupkitError) -> ExitCode:
    """Report a fatal setup error and return the exit code to use."""
    if isinstance(error, ConfigWriteError):
        print_error(
            f"Could not write {error.path}",
            reason=error.reason,
            solution=f"fix the permissions or free space, then run: {RESUME_HINT}",
        )
        return ExitCode.GENERAL_ERROR

    if isinstance(error, ConfigReadError):
        print_error(
            f"Could not read {error.path}",
            reason=error.reason,
            solution=f"fix or move the file aside, then run: {RESUME_HINT}",
        )
        return ExitCode.USER_ERROR

    if isinstance(error, SettingsError):
        print_error(
            f"Could not read settings file {error.path}",
            reason=error.reason,
            solution=f"repair or move the file aside, then run: {RESUME_HINT}",
        )
        return ExitCode.USER_ERROR

    print_error(str(error), solution=RESUME_HINT)
    return ExitCode.GENERAL_ERROR


__all__ = [
    "ExitCode",
    "RESUME_HINT",
    "print_error",
    "print_setup_error",
]
