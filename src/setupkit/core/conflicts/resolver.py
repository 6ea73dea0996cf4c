"""
Conflict resolution for configuration documents.

Turns a document, its ConflictReport and the user's chosen Resolution into
the new document text. User content is never deleted: ``merge`` appends,
``replace`` wraps conflicting lines in superseded markers and appends, and
``skip`` leaves the document alone. The only text rewritten in place is an
unedited managed block installed by an earlier run, which keeps repeated
merges from stacking duplicate blocks. A block edited by hand is kept as a
superseded region instead.
"""

from __future__ import annotations

import logging

from setupkit.core.conflicts.detector import BLOCK_PATTERN_ID
from setupkit.core.conflicts.markers import (
    BEGIN_MARKER,
    END_MARKER,
    HASH_LINE,
    SEPARATOR_RULE,
    SUPERSEDED_CLOSE,
    SUPERSEDED_OPEN,
    block_edited,
    content_hash,
    find_block,
)
from setupkit.core.conflicts.models import ConflictReport
from setupkit.core.state.models import Resolution

logger = logging.getLogger(__name__)


def render_block(content: str) -> str:
    """Wrap content in managed block markers (trailing newline included)."""
    body = content.strip("\n")
    digest = HASH_LINE.format(digest=content_hash(body))
    return f"{BEGIN_MARKER}\n{digest}\n{body}\n{END_MARKER}\n"


def merge_separator(document: str) -> str:
    """
    Text placed between an existing document and an appended block.

    Empty documents get no separator.
    """
    if not document.strip():
        return ""
    prefix = "" if document.endswith("\n") else "\n"
    return f"{prefix}\n{SEPARATOR_RULE}\n\n"


def _retire_block(lines: list[str], span: tuple[int, int]) -> list[str]:
    """Turn a managed block into a superseded region, keeping its content lines."""
    begin, end = span
    retired = list(lines)
    retired[end] = SUPERSEDED_CLOSE + "\n"
    retired[begin] = SUPERSEDED_OPEN.format(ids=BLOCK_PATTERN_ID) + "\n"
    del retired[begin + 1]  # digest line
    return retired


def _merge(document: str, content: str) -> str:
    lines = document.splitlines(keepends=True)
    span = find_block(lines)
    if span is None:
        return document + merge_separator(document) + render_block(content)

    begin, end = span
    if block_edited(lines, span):
        logger.warning(
            "Managed block at lines %d-%d was edited by hand, keeping it as superseded",
            begin + 1,
            end + 1,
        )
        document = "".join(_retire_block(lines, span))
        return document + merge_separator(document) + render_block(content)

    logger.info("Rewriting managed block at lines %d-%d", begin + 1, end + 1)
    return "".join(lines[:begin]) + render_block(content) + "".join(lines[end + 1 :])


def _coalesce(report: ConflictReport) -> list[tuple[int, int, list[str]]]:
    """Merge overlapping or touching user conflict ranges (1-based, inclusive)."""
    ranges = sorted(
        (c.line_range[0], c.line_range[1], c.pattern_id)
        for c in report.conflicts
        if c.pattern_id != BLOCK_PATTERN_ID
    )
    merged: list[tuple[int, int, list[str]]] = []
    for start, end, pattern_id in ranges:
        if merged and start <= merged[-1][1] + 1:
            prev_start, prev_end, ids = merged[-1]
            merged[-1] = (prev_start, max(prev_end, end), ids + [pattern_id])
        else:
            merged.append((start, end, [pattern_id]))
    return merged


def supersede_regions(document: str, report: ConflictReport) -> str:
    """
    Wrap every user conflict region in superseded marker comments.

    Original lines are kept byte for byte; only marker lines are added
    (plus a newline if the last wrapped line ended the file without one).
    """
    lines = document.splitlines(keepends=True)
    for start, end, ids in reversed(_coalesce(report)):
        if end > len(lines):
            logger.warning(
                "Conflict range %d-%d is past end of document, clamping", start, end
            )
            end = len(lines)
        if start > end:
            continue
        if not lines[end - 1].endswith("\n"):
            lines[end - 1] += "\n"
        lines.insert(end, SUPERSEDED_CLOSE + "\n")
        lines.insert(start - 1, SUPERSEDED_OPEN.format(ids=", ".join(ids)) + "\n")
    return "".join(lines)


def resolve(
    document: str | None,
    report: ConflictReport,
    choice: Resolution,
    content: str,
) -> str | None:
    """
    Produce the new configuration document.

    Args:
        document: Current document text, or None if the file does not exist
        report: Conflicts detected in ``document``
        choice: How to resolve them
        content: Content setupkit installs

    Returns:
        New document text. None when the file does not exist and the
        choice is ``skip`` (nothing to write).

    Example:
        >>> resolve(None, ConflictReport(), Resolution.MERGE, "## Model Tiering\\n")
        '## Model Tiering\\n'
    """
    if document is None:
        if choice is Resolution.SKIP:
            return None
        return content

    if choice is Resolution.SKIP:
        return document

    if content.strip() and content.strip() in document:
        logger.info("Configuration content already present, leaving document unchanged")
        return document

    if choice is Resolution.REPLACE:
        document = supersede_regions(document, report)

    return _merge(document, content)
