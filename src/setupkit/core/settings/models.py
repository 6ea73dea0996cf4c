"""
Typed schema for Claude Code settings.json.

Only the keys setupkit edits are modelled: ``hooks``, ``env`` and
``statusLine``. Every other key, at the top level and inside hook
entries, is kept as an extra field and written back unchanged, in its
original position.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class HookCommand(BaseModel):
    """One hook action: a shell command or an LLM prompt."""

    model_config = ConfigDict(extra="allow")

    type: str = Field(description="Hook type: command or prompt")
    prompt: str | None = None
    command: str | None = None
    timeout: int | float | None = None


class HookEntry(BaseModel):
    """One element of a trigger's hook array."""

    model_config = ConfigDict(extra="allow")

    matcher: str | None = None
    hooks: list[HookCommand] = Field(default_factory=list)

    def comparable(self) -> dict[str, Any]:
        """Dump used to decide whether two entries are the same hook."""
        return self.model_dump(mode="json", exclude_none=True)


class HookDefinition(BaseModel):
    """
    Hooks to add for one trigger (e.g. "Stop", "SubagentStop").

    Example:
        >>> HookDefinition(
        ...     trigger="Stop",
        ...     hooks=[HookCommand(type="prompt", prompt="Did tests pass?", timeout=30)],
        ... )
    """

    trigger: str
    hooks: list[HookCommand]
    matcher: str | None = None

    def to_entry(self) -> HookEntry:
        hooks = [h.model_copy(deep=True) for h in self.hooks]
        if self.matcher is None:
            return HookEntry(hooks=hooks)
        return HookEntry(matcher=self.matcher, hooks=hooks)


class StatusLine(BaseModel):
    """Claude Code status line configuration."""

    model_config = ConfigDict(extra="allow")

    type: str = "command"
    command: str
    padding: int | None = None


class SettingsDocument(BaseModel):
    """A parsed settings.json."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    hooks: dict[str, list[HookEntry]] | None = None
    env: dict[str, Any] | None = None
    status_line: StatusLine | None = Field(default=None, alias="statusLine")

    _key_order: list[str] = PrivateAttr(default_factory=list)

    @classmethod
    def from_json_dict(cls, data: dict[str, Any]) -> SettingsDocument:
        doc = cls.model_validate(data)
        doc._key_order = list(data)
        return doc

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize, keeping keys that were present in their original order."""
        data = self.model_dump(mode="json", by_alias=True, exclude_unset=True)
        ordered = {key: data[key] for key in self._key_order if key in data}
        for key, value in data.items():
            ordered.setdefault(key, value)
        return ordered
