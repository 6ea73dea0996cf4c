"""
setupkit command line: the typer app and its global options.
"""

import logging
import sys

import typer
from rich.console import Console

from setupkit import __version__
from setupkit.cli import setup
from setupkit.core.config import load_env_files

app = typer.Typer(
    name="setupkit",
    help="Install model tiering guidance and hooks into Claude Code configuration",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def setup_logging(debug: bool = False) -> None:
    """
    Send log records to stderr.

    Args:
        debug: Show everything down to DEBUG instead of warnings only
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Log debug details to stderr",
    ),
) -> None:
    """
    setupkit - configuration merge & resume tool.

    Adds model tiering guidance to CLAUDE.md, merges optional hooks, status
    line and agent-team settings into settings.json, and installs optional
    git hooks. Progress is saved after every step.

    Quick Start:
        setupkit run        # Interactive setup
        setupkit resume     # Continue an interrupted setup
        setupkit status     # Show saved progress
    """
    setup_logging(debug)
    # exported variables win over every .env file
    load_env_files()
    ctx.ensure_object(dict)["debug"] = debug


app.command(name="run")(setup.run)
app.command(name="resume")(setup.resume)
app.command(name="status")(setup.status)


@app.command()
def version() -> None:
    """Show setupkit version and exit."""
    console.print(f"setupkit version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main", "setup_logging"]
