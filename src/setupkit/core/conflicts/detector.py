"""
Conflict detection for configuration documents.

Scans a CLAUDE.md for content that overlaps with what setupkit installs.
Each pattern is reported at most once (its first match): the question is
whether a category of conflict exists, not how many times it occurs.
Report order follows DEFAULT_PATTERNS, not line order.
"""

from __future__ import annotations

import re

from setupkit.core.conflicts.markers import (
    BEGIN_MARKER_PATTERN,
    block_edited,
    find_block,
    protected_lines,
)
from setupkit.core.conflicts.models import Conflict, ConflictPattern, ConflictReport

BLOCK_PATTERN_ID = "setupkit-block"

DEFAULT_PATTERNS: tuple[ConflictPattern, ...] = (
    ConflictPattern(
        id="model-tiering",
        regex=r"^\s*#{1,6}\s*model[\s-]+tiering\b",
        description="Existing model tiering section",
    ),
    ConflictPattern(
        id="model-selection",
        regex=r"^\s*#{1,6}\s.*\bmodels?[\s-]+(selection|routing|choice)\b",
        description="Existing model selection guidance",
    ),
    ConflictPattern(
        id="subagent-models",
        regex=r"\bsub-?agents?\b.*\b(opus|sonnet|haiku)\b",
        description="Subagents pinned to specific models",
    ),
    ConflictPattern(
        id="agent-teams",
        regex=r"\bagent[\s-]+teams?\b",
        description="Existing agent teams guidance",
    ),
    ConflictPattern(
        id=BLOCK_PATTERN_ID,
        regex=BEGIN_MARKER_PATTERN.pattern,
        description="Block installed by a previous setupkit run",
    ),
)

_HEADING = re.compile(r"^\s{0,3}(#{1,6})\s")
_FENCE = re.compile(r"^\s{0,3}(`{3,}|~{3,})")


def _heading_level(line: str) -> int | None:
    match = _HEADING.match(line)
    return len(match.group(1)) if match else None


def _section_end(lines: list[str], start: int, level: int, protected: set[int]) -> int:
    """0-based index of the last line in the section opened at ``start``."""
    end = len(lines) - 1
    in_fence = False
    for i in range(start + 1, len(lines)):
        if i in protected:
            end = i - 1
            break
        if _FENCE.match(lines[i]):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        next_level = _heading_level(lines[i])
        if next_level is not None and next_level <= level:
            end = i - 1
            break
    while end > start and not lines[end].strip():
        end -= 1
    return end


def _context(lines: list[str], index: int) -> list[str]:
    return lines[max(index - 1, 0) : index + 2]


def detect_conflicts(
    text: str,
    patterns: tuple[ConflictPattern, ...] | list[ConflictPattern] = DEFAULT_PATTERNS,
) -> ConflictReport:
    """
    Scan a document for conflicting content.

    Lines inside a setupkit managed block or an already superseded region
    are ignored for every pattern except the managed block itself.

    Args:
        text: Full document text
        patterns: Patterns to evaluate, in report order

    Returns:
        ConflictReport with one entry per pattern that matched
    """
    lines = text.splitlines()
    protected = protected_lines(lines)
    block = find_block(lines)
    conflicts: list[Conflict] = []

    for pattern in patterns:
        if pattern.id == BLOCK_PATTERN_ID:
            if block is not None:
                begin, end = block
                description = pattern.description
                if block_edited(lines, block):
                    description += " (edited by hand)"
                conflicts.append(
                    Conflict(
                        pattern_id=pattern.id,
                        description=description,
                        line=begin + 1,
                        line_range=(begin + 1, end + 1),
                        context=_context(lines, begin),
                    )
                )
            continue

        regex = pattern.compiled()
        for i, line in enumerate(lines):
            if i in protected or not regex.search(line):
                continue
            level = _heading_level(line)
            end = _section_end(lines, i, level, protected) if level is not None else i
            conflicts.append(
                Conflict(
                    pattern_id=pattern.id,
                    description=pattern.description,
                    line=i + 1,
                    line_range=(i + 1, end + 1),
                    context=_context(lines, i),
                )
            )
            break

    return ConflictReport(conflicts=conflicts)
