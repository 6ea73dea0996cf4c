"""
Conflict detection data models.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field


class ConflictPattern(BaseModel):
    """
    A named, case-insensitive pattern that marks conflicting content.

    Attributes:
        id: Stable identifier reported in conflicts and superseded markers.
        regex: Pattern matched against each line (re.IGNORECASE).
        description: Human-readable explanation shown to the user.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    regex: str
    description: str = ""

    def compiled(self) -> re.Pattern[str]:
        return re.compile(self.regex, re.IGNORECASE)


class Conflict(BaseModel):
    """
    First occurrence of one pattern in a document.

    Attributes:
        pattern_id: Id of the matching ConflictPattern.
        description: Pattern description, for display.
        line: 1-based line number of the match.
        line_range: Inclusive 1-based (start, end) span of the conflicting
            region. A heading match spans its whole section.
        context: The matched line with one line before and after.
    """

    pattern_id: str
    description: str = ""
    line: int = Field(ge=1)
    line_range: tuple[int, int]
    context: list[str] = Field(default_factory=list)


class ConflictReport(BaseModel):
    """Conflicts in declared pattern order, one per matched pattern."""

    conflicts: list[Conflict] = Field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.conflicts)

    def __len__(self) -> int:
        return len(self.conflicts)

    @property
    def pattern_ids(self) -> list[str]:
        return [c.pattern_id for c in self.conflicts]

    def get(self, pattern_id: str) -> Conflict | None:
        for conflict in self.conflicts:
            if conflict.pattern_id == pattern_id:
                return conflict
        return None
