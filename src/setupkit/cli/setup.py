"""
Setup commands: run, resume and status.

``run`` starts a setup pass from the first step, offering earlier answers
as defaults. ``resume`` continues from the last saved step. Both save
progress after every step, so an interrupted run can always be resumed.
"""

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from setupkit.cli.errors import ExitCode, print_error, print_setup_error
from setupkit.core.config import SetupkitConfig, get_state_file_path, load_config
from setupkit.core.errors import SetupkitError
from setupkit.core.setup import (
    STEP_TITLES,
    TERMINAL_STEP,
    ConsolePrompter,
    RunResult,
    RunStatus,
    Step,
    StepContext,
    StepRunner,
    is_complete,
)
from setupkit.core.state import StateStore

console = Console()


def _load_config() -> SetupkitConfig:
    try:
        return load_config()
    except ValidationError as e:
        print_error(
            "Invalid setupkit configuration",
            reason=str(e),
            solution="check ~/.config/setupkit/config.json and .setupkit.json",
        )
        raise typer.Exit(ExitCode.USER_ERROR)


def _build_runner() -> StepRunner:
    config = _load_config()
    store = StateStore(get_state_file_path(config))
    context = StepContext(config=config, prompter=ConsolePrompter(console), cwd=Path.cwd())
    return StepRunner(store, context)


def _report(result: RunResult) -> None:
    if result.status is RunStatus.COMPLETED:
        console.print(f"\n[green]✓[/green] Setup complete (version {result.state.version})")
        raise typer.Exit(ExitCode.SUCCESS)

    if result.status is RunStatus.ALREADY_COMPLETE:
        console.print("[green]✓[/green] Setup is already complete.")
        console.print("[dim]Run 'setupkit run' to reconfigure.[/dim]")
        raise typer.Exit(ExitCode.SUCCESS)

    where = STEP_TITLES.get(result.stopped_at, "") if result.stopped_at is not None else ""
    console.print(f"\n[yellow]Setup stopped[/yellow] at: {where or 'a prompt'}")
    console.print("[dim]Progress is saved. Run 'setupkit resume' to continue.[/dim]")
    raise typer.Exit(ExitCode.ABORTED)


def _execute(restart: bool) -> None:
    runner = _build_runner()
    try:
        result = runner.restart() if restart else runner.run()
    except SetupkitError as e:
        raise typer.Exit(print_setup_error(e))
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled[/yellow]")
        console.print("[dim]Progress is saved. Run 'setupkit resume' to continue.[/dim]")
        raise typer.Exit(ExitCode.SIGINT)
    _report(result)


def run() -> None:
    """
    Run setup from the beginning.

    Walks through every step: scope, conflict check, CLAUDE.md update,
    optional features, settings.json and git hooks. Answers from a previous
    run are offered as defaults.

    Examples:
        setupkit run        # Start (or redo) setup
    """
    _execute(restart=True)


def resume() -> None:
    """
    Resume an interrupted setup from the last saved step.

    Examples:
        setupkit resume
    """
    _execute(restart=False)


def status() -> None:
    """
    Show saved setup progress.

    Examples:
        setupkit status
    """
    config = _load_config()
    store = StateStore(get_state_file_path(config))
    state = store.load()

    table = Table(title="Setup state", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("State file", str(store.path) + ("" if store.exists() else " (not created)"))
    if is_complete(state):
        progress = f"complete ({state.completed_at:%Y-%m-%d %H:%M} UTC, v{state.version})"
    elif state.step >= TERMINAL_STEP:
        progress = "finishing"
    else:
        progress = f"next: {STEP_TITLES[Step(state.step)]} ({state.step}/{TERMINAL_STEP.value})"
    table.add_row("Progress", progress)
    table.add_row("Scope", state.scope.value if state.scope else "-")
    table.add_row("CLAUDE.md", str(state.config_path) if state.config_path else "-")
    table.add_row("Resolution", state.resolution.value if state.resolution else "-")
    table.add_row("Features", ", ".join(state.features.enabled_names()) or "-")

    console.print(table)
