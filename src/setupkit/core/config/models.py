"""
Configuration data models for setupkit.

These models define the structure of .setupkit.json and
~/.config/setupkit/config.json files, with validation via Pydantic.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TEST_HOOK_PROMPT = (
    "Before finishing, check whether the work you just did changed code that "
    "has tests. If it did, confirm the relevant tests were run and passed. "
    "Respond with a decision of 'block' and a short reason if tests are "
    "missing or failing, otherwise 'approve'."
)


class SetupkitConfig(BaseModel):
    """
    Main setupkit configuration model.

    Loaded from multiple sources with precedence:
    env vars > project config > user config > defaults
    """

    model_config = ConfigDict(extra="ignore")

    claude_home: Optional[Path] = Field(
        default=None,
        description="Directory holding the global Claude Code configuration (default ~/.claude)",
    )
    state_file: Optional[Path] = Field(
        default=None,
        description="Where setup progress is persisted (default XDG config dir)",
    )
    hook_timeout: int = Field(
        default=30,
        ge=1,
        le=600,
        description="Timeout in seconds for installed prompt hooks",
    )
    statusline_command: str = Field(
        default="npx -y ccstatusline@latest",
        description="Command installed as the Claude Code status line",
    )
    test_hook_prompt: str = Field(
        default=DEFAULT_TEST_HOOK_PROMPT,
        description="Prompt used by the Stop/SubagentStop test verification hooks",
    )

    @field_validator("claude_home", "state_file", mode="before")
    @classmethod
    def expand_user(cls, v: object) -> object:
        """Expand ~ in configured paths."""
        if isinstance(v, str) and v:
            return Path(v).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v

    @field_validator("statusline_command")
    @classmethod
    def command_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("statusline_command must not be blank")
        return v
