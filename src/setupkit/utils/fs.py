"""
File reading and writing helpers.

Every file setupkit touches is written whole: content goes to a temp file in
the target directory which then replaces the target, so a failed write
leaves either the old file or the new one, never a truncated mix.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from setupkit.core.errors import ConfigReadError, ConfigWriteError


def atomic_write_text(path: Path, text: str, *, mode: int | None = None) -> None:
    """
    Replace ``path`` with ``text``, creating parent directories.

    Args:
        path: File to write
        text: Full new content
        mode: Optional permission bits applied before the replace

    Raises:
        ConfigWriteError: If the directory or file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}_", suffix=".tmp")
    except OSError as e:
        raise ConfigWriteError(path, str(e)) from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        if mode is not None:
            os.chmod(temp_path, mode)
        os.replace(temp_path, path)
    except OSError as e:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise ConfigWriteError(path, str(e)) from e


def read_text_or_none(path: Path) -> str | None:
    """
    Read a UTF-8 text file, or return None if it does not exist.

    Raises:
        ConfigReadError: If the path exists but cannot be read as UTF-8 text
    """
    if not path.exists():
        return None
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        reason = f"not valid UTF-8 text ({e.reason} at byte {e.start})"
        raise ConfigReadError(path, reason) from e
    except OSError as e:
        raise ConfigReadError(path, str(e)) from e
