"""
Pytest configuration and shared fixtures.

Every test runs with HOME and XDG_CONFIG_HOME pointed into tmp_path and no
SETUPKIT_* variables set, so nothing touches the real ~/.claude.
"""

import os
from pathlib import Path
from typing import Any, Callable

import pytest

from setupkit.core.config import SetupkitConfig, clear_cache
from setupkit.core.setup import ScriptedPrompter, StepContext
from setupkit.core.setup.steps import AGENT_TEAMS_ENV
from setupkit.core.state import StateStore

# ==============================================================================
# Environment Isolation
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point HOME/XDG at tmp_path and drop setupkit env overrides."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    for key in list(os.environ):
        if key.startswith("SETUPKIT_") or key == AGENT_TEAMS_ENV:
            monkeypatch.delenv(key)

    clear_cache()
    yield home
    clear_cache()


# ==============================================================================
# Directory Fixtures
# ==============================================================================


@pytest.fixture
def claude_home(isolated_env: Path) -> Path:
    """Global Claude Code directory used by the tests (not created)."""
    return isolated_env / ".claude"


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary git project.

    Creates:
    - .git/hooks/
    """
    project = tmp_path / "project"
    (project / ".git" / "hooks").mkdir(parents=True)
    return project


@pytest.fixture
def state_store(tmp_path: Path) -> StateStore:
    """State store backed by a file in tmp_path."""
    return StateStore(tmp_path / "state" / "setup-state.json")


# ==============================================================================
# Setup Fixtures
# ==============================================================================


@pytest.fixture
def make_context(
    claude_home: Path, project_dir: Path
) -> Callable[..., StepContext]:
    """
    Factory for StepContext with scripted answers.

    Example:
        context = make_context(["local", "merge", []])
    """

    def _make(
        answers: list[Any] | None = None,
        *,
        cwd: Path | None = None,
        content: str | None = None,
        **config: Any,
    ) -> StepContext:
        return StepContext(
            config=SetupkitConfig(claude_home=claude_home, **config),
            prompter=ScriptedPrompter(list(answers or [])),
            cwd=cwd or project_dir,
            content=content,
        )

    return _make
