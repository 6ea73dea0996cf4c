"""
Setup state data models.

SetupState is the persisted record of how far setup has progressed and
which choices the user made. It is serialized to JSON with camelCase keys.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Scope(str, Enum):
    """Where configuration changes apply."""

    GLOBAL = "global"  # ~/.claude, shared by every project
    LOCAL = "local"  # the current project directory


class Resolution(str, Enum):
    """How to resolve conflicts found in the configuration document."""

    MERGE = "merge"
    REPLACE = "replace"
    SKIP = "skip"


class GitHookToggles(BaseModel):
    """Which git hooks to install into the project repository."""

    model_config = ConfigDict(populate_by_name=True)

    pre_commit: bool = Field(default=False, alias="preCommit")
    pre_push: bool = Field(default=False, alias="prePush")


class FeatureToggles(BaseModel):
    """
    Optional features chosen during setup.

    The toggles are also addressable by dotted name (``testHook``,
    ``gitHooks.preCommit``, ...) so prompts can offer them as one
    multi-choice question.
    """

    model_config = ConfigDict(populate_by_name=True)

    test_hook: bool = Field(default=False, alias="testHook")
    git_hooks: GitHookToggles = Field(default_factory=GitHookToggles, alias="gitHooks")
    status_line: bool = Field(default=False, alias="statusLine")
    agent_teams: bool = Field(default=False, alias="agentTeams")

    def enabled_names(self) -> list[str]:
        """Dotted names of enabled toggles, in FEATURE_NAMES order."""
        flat = {
            "testHook": self.test_hook,
            "gitHooks.preCommit": self.git_hooks.pre_commit,
            "gitHooks.prePush": self.git_hooks.pre_push,
            "statusLine": self.status_line,
            "agentTeams": self.agent_teams,
        }
        return [name for name in FEATURE_NAMES if flat[name]]

    @classmethod
    def from_names(cls, names: list[str] | set[str]) -> FeatureToggles:
        """Build toggles from dotted names; unknown names raise ValueError."""
        unknown = set(names) - set(FEATURE_NAMES)
        if unknown:
            raise ValueError(f"Unknown feature toggle(s): {', '.join(sorted(unknown))}")
        return cls(
            test_hook="testHook" in names,
            git_hooks=GitHookToggles(
                pre_commit="gitHooks.preCommit" in names,
                pre_push="gitHooks.prePush" in names,
            ),
            status_line="statusLine" in names,
            agent_teams="agentTeams" in names,
        )

    @property
    def any_git_hooks(self) -> bool:
        return self.git_hooks.pre_commit or self.git_hooks.pre_push


FEATURE_NAMES: tuple[str, ...] = (
    "testHook",
    "gitHooks.preCommit",
    "gitHooks.prePush",
    "statusLine",
    "agentTeams",
)


class SetupState(BaseModel):
    """
    Persisted setup progress.

    Attributes:
        step: Index of the next step to run. Anything at or past the
            terminal step means setup is complete.
        scope: Chosen scope, once asked.
        config_path: Configuration document (CLAUDE.md) for that scope.
        resolution: Conflict resolution choice, once decided.
        features: Optional feature toggles.
        completed_at: When setup last reached the terminal step.
        version: setupkit version that completed setup.
    """

    model_config = ConfigDict(populate_by_name=True)

    step: int = Field(default=0, ge=0)
    scope: Scope | None = None
    config_path: Path | None = Field(default=None, alias="configPath")
    resolution: Resolution | None = None
    features: FeatureToggles = Field(default_factory=FeatureToggles)
    completed_at: datetime | None = Field(default=None, alias="completedAt")
    version: str | None = None

    def to_json_dict(self) -> dict[str, object]:
        """Serialize for the state file (camelCase keys, unset fields omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
