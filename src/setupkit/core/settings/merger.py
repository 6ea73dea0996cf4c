"""
Non-destructive merging of hook definitions and related keys into
Claude Code settings.json.

Implementation:
    - Reads existing settings.json (if present) into a typed SettingsDocument
    - Appends new hook entries to each trigger's array, never replacing it
    - Installs the status line and environment keys without touching others
    - Writes the whole document back (2-space indent, trailing newline)

A settings file that exists but cannot be parsed is an error rather than
being treated as empty: rewriting it would discard the user's settings.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

from pydantic import ValidationError

from setupkit.core.errors import SettingsError
from setupkit.core.settings.models import HookDefinition, SettingsDocument, StatusLine
from setupkit.utils.fs import atomic_write_text

logger = logging.getLogger(__name__)


def load_settings(path: Path) -> SettingsDocument:
    """
    Load a settings document.

    Returns:
        Parsed document, or an empty one if the file does not exist

    Raises:
        SettingsError: If the file exists but is not a valid settings object
    """
    if not path.exists():
        return SettingsDocument()

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SettingsError(path, f"invalid JSON: {e}") from e
    except OSError as e:
        raise SettingsError(path, str(e)) from e

    if not isinstance(data, dict):
        raise SettingsError(path, "top level is not a JSON object")

    try:
        doc = SettingsDocument.from_json_dict(data)
    except ValidationError as e:
        raise SettingsError(path, f"unexpected structure: {e}") from e

    logger.info("Loaded existing settings from %s", path)
    return doc


def write_settings(path: Path, settings: SettingsDocument) -> None:
    """
    Write a settings document.

    Raises:
        ConfigWriteError: If the file cannot be written
    """
    atomic_write_text(path, json.dumps(settings.to_json_dict(), indent=2) + "\n")
    logger.info("Wrote updated settings to %s", path)


def merge_hooks(
    settings: SettingsDocument,
    definitions: Iterable[HookDefinition],
    *,
    dedupe: bool = False,
) -> SettingsDocument:
    """
    Merge hook definitions into a settings document.

    For each trigger, a missing array is created holding exactly the new
    entries; an existing array gets the new entries appended after the
    entries already there. Existing entries are never removed or reordered.

    Args:
        settings: Document to merge into (not modified)
        definitions: Hooks to add, each scoped to a trigger name
        dedupe: Skip an entry identical to one already under its trigger.
            Without it, merging the same definition twice appends it twice.

    Returns:
        New SettingsDocument with the merged hooks

    Example:
        >>> doc = merge_hooks(SettingsDocument(), [stop_hook])
        >>> list(doc.hooks)
        ['Stop']
    """
    merged = settings.model_copy(deep=True)
    hooks = dict(merged.hooks or {})
    changed = False

    for definition in definitions:
        entry = definition.to_entry()
        existing = list(hooks.get(definition.trigger, []))
        if dedupe and any(e.comparable() == entry.comparable() for e in existing):
            logger.info("Hook for %s already configured, skipping", definition.trigger)
            continue
        existing.append(entry)
        hooks[definition.trigger] = existing
        changed = True

    if changed:
        merged.hooks = hooks
    return merged


def set_status_line(
    settings: SettingsDocument, command: str
) -> tuple[SettingsDocument, bool]:
    """
    Point the status line at ``command``.

    A status line that runs a different command is left in place.

    Returns:
        (document, applied) where applied is False if an existing status
        line was kept
    """
    current = settings.status_line
    if current is not None and current.command != command:
        logger.warning("Keeping existing status line command: %s", current.command)
        return settings, False

    updated = settings.model_copy(deep=True)
    if current is None:
        updated.status_line = StatusLine(type="command", command=command, padding=0)
    return updated, True


def set_env(settings: SettingsDocument, key: str, value: str) -> SettingsDocument:
    """Set one environment variable in the ``env`` block, keeping the rest."""
    updated = settings.model_copy(deep=True)
    env = dict(updated.env or {})
    env[key] = value
    updated.env = env
    return updated
