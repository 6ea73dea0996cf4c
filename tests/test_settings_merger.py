"""
Tests for settings.json hook merging.

Tests cover:
- Loading: missing, malformed and non-object files
- merge_hooks: new triggers, appending to existing arrays, dedupe
- Unknown keys and key order surviving a round trip
- Status line and env updates
"""

import json
from pathlib import Path

import pytest

from setupkit.core.errors import SettingsError
from setupkit.core.settings import (
    HookCommand,
    HookDefinition,
    SettingsDocument,
    load_settings,
    merge_hooks,
    set_env,
    set_status_line,
    write_settings,
)


def _prompt_hook(trigger: str, prompt: str = "Did the tests pass?") -> HookDefinition:
    return HookDefinition(
        trigger=trigger,
        hooks=[HookCommand(type="prompt", prompt=prompt, timeout=30)],
    )


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    return tmp_path / ".claude" / "settings.json"


class TestLoadSettings:
    """Tests for load_settings."""

    def test_missing_file_is_empty_document(self, settings_path: Path) -> None:
        """Test that a missing file loads as an empty document."""
        doc = load_settings(settings_path)

        assert doc.to_json_dict() == {}

    def test_invalid_json_raises(self, settings_path: Path) -> None:
        """Test that broken JSON is an error, not an empty document."""
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text("{ not json")

        with pytest.raises(SettingsError) as exc_info:
            load_settings(settings_path)

        assert exc_info.value.path == settings_path
        assert "invalid JSON" in exc_info.value.reason

    def test_non_object_raises(self, settings_path: Path) -> None:
        """Test that a JSON array at the top level is rejected."""
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text("[]")

        with pytest.raises(SettingsError):
            load_settings(settings_path)

    def test_wrong_hooks_shape_raises(self, settings_path: Path) -> None:
        """Test that a hooks value that is not a mapping is rejected."""
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text(json.dumps({"hooks": ["Stop"]}))

        with pytest.raises(SettingsError):
            load_settings(settings_path)


class TestMergeHooks:
    """Tests for merge_hooks."""

    def test_new_trigger_gets_exactly_new_entries(self) -> None:
        """Test that a missing trigger array is created."""
        doc = merge_hooks(SettingsDocument(), [_prompt_hook("Stop")])

        assert doc.to_json_dict() == {
            "hooks": {
                "Stop": [
                    {
                        "hooks": [
                            {"type": "prompt", "prompt": "Did the tests pass?", "timeout": 30}
                        ]
                    }
                ]
            }
        }

    def test_existing_entries_kept_in_order(self) -> None:
        """Test that new entries are appended after existing ones."""
        existing = {
            "hooks": {
                "Stop": [{"hooks": [{"type": "command", "command": "notify-send done"}]}]
            }
        }
        doc = SettingsDocument.from_json_dict(existing)

        merged = merge_hooks(doc, [_prompt_hook("Stop")])

        stop = merged.to_json_dict()["hooks"]["Stop"]
        assert len(stop) == 2
        assert stop[0] == existing["hooks"]["Stop"][0]
        assert stop[1]["hooks"][0]["type"] == "prompt"

    def test_other_triggers_untouched(self) -> None:
        """Test that unrelated triggers are preserved."""
        pre_tool = [{"matcher": "Bash", "hooks": [{"type": "command", "command": "lint"}]}]
        doc = SettingsDocument.from_json_dict({"hooks": {"PreToolUse": pre_tool}})

        merged = merge_hooks(doc, [_prompt_hook("Stop"), _prompt_hook("SubagentStop")])

        hooks = merged.to_json_dict()["hooks"]
        assert hooks["PreToolUse"] == pre_tool
        assert list(hooks) == ["PreToolUse", "Stop", "SubagentStop"]

    def test_input_document_not_modified(self) -> None:
        """Test that merge_hooks returns a new document."""
        doc = SettingsDocument()

        merge_hooks(doc, [_prompt_hook("Stop")])

        assert doc.hooks is None

    def test_without_dedupe_appends_twice(self) -> None:
        """Test that repeated merges append duplicates by default."""
        doc = merge_hooks(SettingsDocument(), [_prompt_hook("Stop")])

        doc = merge_hooks(doc, [_prompt_hook("Stop")])

        assert len(doc.to_json_dict()["hooks"]["Stop"]) == 2

    def test_dedupe_skips_identical_entry(self) -> None:
        """Test that dedupe recognises an entry already present."""
        doc = merge_hooks(SettingsDocument(), [_prompt_hook("Stop")])

        again = merge_hooks(doc, [_prompt_hook("Stop")], dedupe=True)

        assert again.to_json_dict() == doc.to_json_dict()

    def test_dedupe_keeps_different_entry(self) -> None:
        """Test that dedupe only skips exact matches."""
        doc = merge_hooks(SettingsDocument(), [_prompt_hook("Stop", "first")])

        again = merge_hooks(doc, [_prompt_hook("Stop", "second")], dedupe=True)

        assert len(again.to_json_dict()["hooks"]["Stop"]) == 2

    def test_nothing_to_add_leaves_hooks_unset(self) -> None:
        """Test that an empty merge does not add a hooks key."""
        doc = merge_hooks(SettingsDocument(), [])

        assert "hooks" not in doc.to_json_dict()


class TestRoundTrip:
    """Tests for writing settings back to disk."""

    def test_unknown_keys_and_order_preserved(self, settings_path: Path) -> None:
        """Test that keys setupkit does not model survive unchanged."""
        original = {
            "model": "sonnet",
            "permissions": {"allow": ["Bash(git status)"]},
            "hooks": {
                "Stop": [
                    {"hooks": [{"type": "command", "command": "say done", "extra": True}]}
                ]
            },
            "includeCoAuthoredBy": False,
        }
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text(json.dumps(original))

        doc = merge_hooks(load_settings(settings_path), [_prompt_hook("SubagentStop")])
        write_settings(settings_path, doc)

        written = json.loads(settings_path.read_text())
        assert list(written) == ["model", "permissions", "hooks", "includeCoAuthoredBy"]
        assert written["permissions"] == original["permissions"]
        assert written["hooks"]["Stop"] == original["hooks"]["Stop"]
        assert "SubagentStop" in written["hooks"]

    def test_written_with_indent_and_newline(self, settings_path: Path) -> None:
        """Test the on-disk format."""
        write_settings(settings_path, set_env(SettingsDocument(), "A", "1"))

        text = settings_path.read_text()
        assert text == '{\n  "env": {\n    "A": "1"\n  }\n}\n'


class TestStatusLineAndEnv:
    """Tests for set_status_line and set_env."""

    def test_status_line_added(self) -> None:
        """Test installing a status line on an empty document."""
        doc, applied = set_status_line(SettingsDocument(), "npx -y ccstatusline@latest")

        assert applied is True
        assert doc.to_json_dict()["statusLine"] == {
            "type": "command",
            "command": "npx -y ccstatusline@latest",
            "padding": 0,
        }

    def test_different_status_line_kept(self) -> None:
        """Test that a user's own status line is not overwritten."""
        doc = SettingsDocument.from_json_dict(
            {"statusLine": {"type": "command", "command": "my-status"}}
        )

        result, applied = set_status_line(doc, "npx -y ccstatusline@latest")

        assert applied is False
        assert result.to_json_dict()["statusLine"]["command"] == "my-status"

    def test_same_status_line_is_applied(self) -> None:
        """Test that an identical status line counts as applied."""
        doc = SettingsDocument.from_json_dict(
            {"statusLine": {"type": "command", "command": "npx -y ccstatusline@latest"}}
        )

        result, applied = set_status_line(doc, "npx -y ccstatusline@latest")

        assert applied is True
        assert result.to_json_dict() == doc.to_json_dict()

    def test_env_keeps_other_variables(self) -> None:
        """Test that set_env only touches its own key."""
        doc = SettingsDocument.from_json_dict({"env": {"DEBUG": "1"}})

        result = set_env(doc, "CLAUDE_CODE_EXPERIMENTAL_AGENT_TEAMS", "1")

        assert result.to_json_dict()["env"] == {
            "DEBUG": "1",
            "CLAUDE_CODE_EXPERIMENTAL_AGENT_TEAMS": "1",
        }
        assert doc.to_json_dict()["env"] == {"DEBUG": "1"}
