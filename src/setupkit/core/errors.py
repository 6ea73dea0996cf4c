"""
Exception taxonomy for setupkit.

Only failures that cannot be recovered locally are raised. A corrupt state
file and an unanswered conflict prompt are handled where they occur and
never surface as exceptions.
"""

from __future__ import annotations

from pathlib import Path


class SetupkitError(Exception):
    """Base class for setupkit errors."""

    pass


class ConfigWriteError(SetupkitError):
    """A configuration, settings or state file could not be written."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Could not write {self.path}: {reason}")


class ConfigReadError(SetupkitError):
    """An existing configuration document or hook file could not be read."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Could not read {self.path}: {reason}")


class SettingsError(SetupkitError):
    """An existing settings document could not be read or understood."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Could not use settings file {self.path}: {reason}")


class UserAbort(SetupkitError):
    """
    The user cancelled a prompt.

    Raised by prompters and converted by the step runner into an aborted
    run result, so callers of the runner never see it.
    """

    pass
