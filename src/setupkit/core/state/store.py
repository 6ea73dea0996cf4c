"""
JSON state store for reading/writing the setup state file.

The store never raises on load: a missing, unreadable or malformed file
means "start from step 0". Saves replace the whole file atomically.

Known limitation: there is no locking. Two setupkit processes sharing a
state file will overwrite each other's progress.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from setupkit.core.state.models import SetupState
from setupkit.utils.fs import atomic_write_text

logger = logging.getLogger(__name__)


class StateStore:
    """
    Store for SetupState persisted as a single JSON document.

    Example:
        >>> store = StateStore(Path("~/.config/setupkit/setup-state.json").expanduser())
        >>> state = store.load()
        >>> store.save(state.model_copy(update={"step": 1}))
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        """Get the path to the state file."""
        return self._path

    def exists(self) -> bool:
        """Check if a state file has been written."""
        return self._path.exists()

    def load(self) -> SetupState:
        """
        Load the persisted state.

        Returns:
            The saved state, or a fresh SetupState() if the file is missing
            or cannot be parsed
        """
        if not self._path.exists():
            return SetupState()

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return SetupState.model_validate(data)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            logger.warning("Ignoring unreadable setup state at %s: %s", self._path, e)
            return SetupState()

    def save(self, state: SetupState) -> None:
        """
        Write the full state, replacing the previous file.

        Raises:
            ConfigWriteError: If the directory or file cannot be written
        """
        atomic_write_text(self._path, json.dumps(state.to_json_dict(), indent=2) + "\n")
        logger.debug("Saved setup state (step %d) to %s", state.step, self._path)
