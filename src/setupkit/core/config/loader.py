"""
Layered configuration for setupkit.

Sources are applied in order, each overriding the one before:

    model defaults -> user config.json -> project .setupkit.json -> SETUPKIT_* env

The module also knows where setupkit keeps its own files (config, state)
and where the global Claude Code directory lives.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Callable

from .models import SetupkitConfig

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILE = ".setupkit.json"

_cached: SetupkitConfig | None = None


def get_xdg_config_home() -> Path:
    """$XDG_CONFIG_HOME, or ~/.config when unset."""
    configured = os.environ.get("XDG_CONFIG_HOME")
    return Path(configured) if configured else Path.home() / ".config"


def get_user_config_path() -> Path:
    """User-wide setupkit config file."""
    return get_xdg_config_home() / "setupkit" / "config.json"


def get_project_config_path(project_dir: Path | None = None) -> Path:
    """Project config file in ``project_dir`` (default: cwd)."""
    return (project_dir or Path.cwd()) / PROJECT_CONFIG_FILE


def get_claude_home(config: SetupkitConfig) -> Path:
    """Directory holding the global Claude Code configuration."""
    return config.claude_home or Path.home() / ".claude"


def get_state_file_path(config: SetupkitConfig) -> Path:
    """
    Location of the persisted setup state.

    Returns:
        Configured state file, or ~/.config/setupkit/setup-state.json
    """
    return config.state_file or get_xdg_config_home() / "setupkit" / "setup-state.json"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Return ``base`` updated with ``override``, recursing into nested mappings.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 30}})
        {'a': 1, 'b': {'x': 10, 'y': 30}}
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def read_config_file(path: Path) -> dict[str, Any]:
    """
    Read one config layer.

    A missing file is an empty layer. A file that is not a JSON object is
    logged and treated as empty so a typo never blocks setup.
    """
    if not path.is_file():
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Ignoring config file %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: expected a JSON object", path)
        return {}
    return data


def _positive_int(raw: str) -> int:
    value = int(raw)
    if value < 1:
        raise ValueError(f"must be at least 1, got {value}")
    return value


# env var -> (config field, parser)
ENV_OVERRIDES: dict[str, tuple[str, Callable[[str], Any]]] = {
    "SETUPKIT_STATE_FILE": ("state_file", str),
    "SETUPKIT_CLAUDE_HOME": ("claude_home", str),
    "SETUPKIT_HOOK_TIMEOUT": ("hook_timeout", _positive_int),
}


def env_layer() -> dict[str, Any]:
    """Config values taken from SETUPKIT_* variables; bad values are skipped."""
    layer: dict[str, Any] = {}
    for var, (field, parse) in ENV_OVERRIDES.items():
        raw = os.environ.get(var)
        if not raw:
            continue
        try:
            layer[field] = parse(raw)
        except ValueError as e:
            logger.warning("Ignoring %s=%r: %s", var, raw, e)
    return layer


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> SetupkitConfig:
    """
    Build the effective configuration.

    Args:
        project_dir: Directory holding .setupkit.json (default: cwd)
        use_cache: Return the config from an earlier call if there is one

    Raises:
        ValidationError: If the combined values are invalid
    """
    global _cached

    if use_cache and _cached is not None:
        return _cached

    values: dict[str, Any] = {}
    for layer in (
        read_config_file(get_user_config_path()),
        read_config_file(get_project_config_path(project_dir)),
        env_layer(),
    ):
        values = deep_merge(values, layer)

    _cached = SetupkitConfig(**values)
    logger.debug("Loaded configuration: %s", _cached)
    return _cached


def clear_cache() -> None:
    """Forget the cached configuration (tests, or after editing config files)."""
    global _cached
    _cached = None
