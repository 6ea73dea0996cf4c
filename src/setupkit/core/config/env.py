"""Environment file loading.

SETUPKIT_* variables may live in .env files next to the user or project
configuration. Files are applied lowest precedence first:

    user .env  <  project .env  <  project .env.local  <  exported shell env

A value exported in the shell is never replaced.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values

from .loader import get_xdg_config_home

logger = logging.getLogger(__name__)


def default_env_files(project_dir: Path | None = None) -> list[Path]:
    """Return the .env files consulted for a project, lowest precedence first."""
    project_dir = project_dir or Path.cwd()
    return [
        get_xdg_config_home() / "setupkit" / ".env",
        project_dir / ".env",
        project_dir / ".env.local",
    ]


def load_env_files(paths: Iterable[Path] | None = None) -> dict[str, str]:
    """
    Apply .env files to os.environ.

    Args:
        paths: Files to read, lowest precedence first (defaults to
            default_env_files())

    Returns:
        The variables that were set from files
    """
    if paths is None:
        paths = default_env_files()

    preexisting = set(os.environ)
    applied: dict[str, str] = {}
    for path in paths:
        if not path.is_file():
            continue
        for key, value in dotenv_values(path).items():
            if key is None or value is None or key in preexisting:
                continue
            applied[key] = value
        logger.debug("Read environment file %s", path)

    os.environ.update(applied)
    return applied
