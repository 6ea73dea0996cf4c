"""
Claude Code settings.json handling.

Example:
    >>> from setupkit.core.settings import load_settings, merge_hooks, write_settings
    >>> doc = merge_hooks(load_settings(path), definitions, dedupe=True)
    >>> write_settings(path, doc)
"""

from .merger import load_settings, merge_hooks, set_env, set_status_line, write_settings
from .models import HookCommand, HookDefinition, HookEntry, SettingsDocument, StatusLine

__all__ = [
    "HookCommand",
    "HookDefinition",
    "HookEntry",
    "SettingsDocument",
    "StatusLine",
    "load_settings",
    "merge_hooks",
    "set_env",
    "set_status_line",
    "write_settings",
]
