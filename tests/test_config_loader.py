"""
Tests for configuration loading and .env handling.

Tests cover:
- Defaults when no config exists
- User < project < environment precedence
- Invalid files and values being ignored or rejected
- Well-known paths
- .env loading never overriding the shell environment
"""

import json
import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from setupkit.core.config import (
    SetupkitConfig,
    get_claude_home,
    get_state_file_path,
    get_user_config_path,
    load_config,
    load_env_files,
)
from setupkit.core.config.env import default_env_files
from setupkit.core.config.loader import deep_merge


def _write_json(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self, tmp_path: Path) -> None:
        """Test that no config files means model defaults."""
        config = load_config(project_dir=tmp_path)

        assert config.hook_timeout == 30
        assert config.claude_home is None
        assert config.statusline_command == "npx -y ccstatusline@latest"

    def test_project_overrides_user(self, tmp_path: Path) -> None:
        """Test the precedence of .setupkit.json over the user config."""
        _write_json(get_user_config_path(), {"hook_timeout": 45, "statusline_command": "a"})
        _write_json(tmp_path / ".setupkit.json", {"hook_timeout": 60})

        config = load_config(project_dir=tmp_path)

        assert config.hook_timeout == 60
        assert config.statusline_command == "a"

    def test_env_overrides_files(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that SETUPKIT_* variables win over every file."""
        _write_json(tmp_path / ".setupkit.json", {"hook_timeout": 60})
        monkeypatch.setenv("SETUPKIT_HOOK_TIMEOUT", "90")
        monkeypatch.setenv("SETUPKIT_CLAUDE_HOME", str(tmp_path / "claude"))
        monkeypatch.setenv("SETUPKIT_STATE_FILE", str(tmp_path / "state.json"))

        config = load_config(project_dir=tmp_path)

        assert config.hook_timeout == 90
        assert config.claude_home == tmp_path / "claude"
        assert config.state_file == tmp_path / "state.json"

    @pytest.mark.parametrize("value", ["soon", "0", "-5"])
    def test_invalid_env_timeout_ignored(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, value: str
    ) -> None:
        monkeypatch.setenv("SETUPKIT_HOOK_TIMEOUT", value)

        assert load_config(project_dir=tmp_path).hook_timeout == 30

    def test_malformed_file_ignored(self, tmp_path: Path) -> None:
        """Test that a broken config file falls back to the other layers."""
        (tmp_path / ".setupkit.json").write_text("{ nope")

        assert load_config(project_dir=tmp_path).hook_timeout == 30

    def test_invalid_value_raises(self, tmp_path: Path) -> None:
        """Test that out-of-range values fail validation."""
        _write_json(tmp_path / ".setupkit.json", {"hook_timeout": 5000})

        with pytest.raises(ValidationError):
            load_config(project_dir=tmp_path)

    def test_result_is_cached(self, tmp_path: Path) -> None:
        """Test that later calls return the first loaded config."""
        first = load_config(project_dir=tmp_path)
        _write_json(tmp_path / ".setupkit.json", {"hook_timeout": 60})

        assert load_config(project_dir=tmp_path) is first
        assert load_config(project_dir=tmp_path, use_cache=False).hook_timeout == 60

    def test_tilde_expanded(self, isolated_env: Path) -> None:
        config = SetupkitConfig(claude_home="~/custom-claude")

        assert config.claude_home == isolated_env / "custom-claude"

    def test_blank_statusline_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SetupkitConfig(statusline_command="   ")


class TestPaths:
    """Tests for well-known locations."""

    def test_default_locations(self, isolated_env: Path) -> None:
        config = SetupkitConfig()

        assert get_claude_home(config) == isolated_env / ".claude"
        assert get_state_file_path(config) == (
            isolated_env / ".config" / "setupkit" / "setup-state.json"
        )

    def test_configured_locations(self, tmp_path: Path) -> None:
        config = SetupkitConfig(claude_home=tmp_path / "c", state_file=tmp_path / "s.json")

        assert get_claude_home(config) == tmp_path / "c"
        assert get_state_file_path(config) == tmp_path / "s.json"


def test_deep_merge_nested() -> None:
    assert deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 30}}) == {
        "a": 1,
        "b": {"x": 10, "y": 30},
    }


class TestEnvFiles:
    """Tests for load_env_files."""

    @pytest.fixture(autouse=True)
    def restore_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Let monkeypatch restore the variables the loader sets."""
        for key in ("SETUPKIT_HOOK_TIMEOUT", "SETUPKIT_STATE_FILE", "UNRELATED_VALUE"):
            monkeypatch.setenv(key, "placeholder")
            monkeypatch.delenv(key)

    def test_later_files_win(self, tmp_path: Path) -> None:
        """Test that .env.local overrides .env."""
        (tmp_path / ".env").write_text("SETUPKIT_HOOK_TIMEOUT=40\nUNRELATED_VALUE=x\n")
        (tmp_path / ".env.local").write_text("SETUPKIT_HOOK_TIMEOUT=50\n")

        applied = load_env_files([tmp_path / ".env", tmp_path / ".env.local"])

        assert applied == {"SETUPKIT_HOOK_TIMEOUT": "50", "UNRELATED_VALUE": "x"}
        assert os.environ["SETUPKIT_HOOK_TIMEOUT"] == "50"

    def test_shell_environment_wins(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that an exported variable is never replaced."""
        monkeypatch.setenv("SETUPKIT_HOOK_TIMEOUT", "15")
        (tmp_path / ".env").write_text("SETUPKIT_HOOK_TIMEOUT=40\n")

        applied = load_env_files([tmp_path / ".env"])

        assert applied == {}
        assert os.environ["SETUPKIT_HOOK_TIMEOUT"] == "15"

    def test_missing_files_skipped(self, tmp_path: Path) -> None:
        assert load_env_files([tmp_path / "absent.env"]) == {}

    def test_default_file_order(self, isolated_env: Path, tmp_path: Path) -> None:
        assert default_env_files(tmp_path) == [
            isolated_env / ".config" / "setupkit" / ".env",
            tmp_path / ".env",
            tmp_path / ".env.local",
        ]

    def test_env_file_feeds_config(self, tmp_path: Path) -> None:
        """Test that a value from .env reaches load_config."""
        (tmp_path / ".env").write_text(f"SETUPKIT_STATE_FILE={tmp_path / 'from-env.json'}\n")

        load_env_files(default_env_files(tmp_path))

        assert load_config(project_dir=tmp_path).state_file == tmp_path / "from-env.json"
