"""
Marker comments setupkit writes into configuration documents.

Managed blocks wrap the content setupkit installs so later runs can find
and rewrite it. The digest line lets a later run tell whether the block
was edited by hand:

    <!-- BEGIN SETUPKIT MANAGED BLOCK v1 -->
    <!-- sha256:<digest of the installed content> -->
    (installed content)
    <!-- END SETUPKIT MANAGED BLOCK -->

Superseded regions wrap user lines that the ``replace`` resolution
commented out of effect without deleting them:

    <!-- setupkit:superseded model-tiering -->
    (original lines)
    <!-- /setupkit:superseded -->
"""

import hashlib
import re

BLOCK_VERSION = 1

BEGIN_MARKER = f"<!-- BEGIN SETUPKIT MANAGED BLOCK v{BLOCK_VERSION} -->"
BEGIN_MARKER_PATTERN = re.compile(r"^<!-- BEGIN SETUPKIT MANAGED BLOCK v(\d+) -->$")
END_MARKER = "<!-- END SETUPKIT MANAGED BLOCK -->"
END_MARKER_PATTERN = re.compile(r"^<!-- END SETUPKIT MANAGED BLOCK -->$")
HASH_LINE = "<!-- sha256:{digest} -->"
HASH_LINE_PATTERN = re.compile(r"^<!-- sha256:([a-f0-9]{64}) -->$")

SUPERSEDED_OPEN = "<!-- setupkit:superseded {ids} -->"
SUPERSEDED_OPEN_PATTERN = re.compile(r"^<!-- setupkit:superseded [\w\s,-]+ -->$")
SUPERSEDED_CLOSE = "<!-- /setupkit:superseded -->"
SUPERSEDED_CLOSE_PATTERN = re.compile(r"^<!-- /setupkit:superseded -->$")

# Horizontal rule placed between user content and an appended managed block
SEPARATOR_RULE = "---"


def content_hash(content: str) -> str:
    """sha256 hex digest of block content, ignoring surrounding whitespace."""
    return hashlib.sha256(content.strip().encode("utf-8")).hexdigest()


def find_block(lines: list[str]) -> tuple[int, int] | None:
    """
    Locate the first complete managed block.

    The block is the last BEGIN marker before the first END marker that
    follows it, so a stray BEGIN left behind by a hand edit is never
    paired with the END of a block further down.

    Returns:
        0-based (begin, end) line indexes of the markers, or None
    """
    begin: int | None = None
    for i, line in enumerate(lines):
        stripped = line.strip()
        if BEGIN_MARKER_PATTERN.match(stripped):
            begin = i
        elif begin is not None and END_MARKER_PATTERN.match(stripped):
            return begin, i
    return None


def block_edited(lines: list[str], span: tuple[int, int]) -> bool:
    """
    True if the block's content no longer matches its recorded digest.

    Blocks without a digest line are treated as unedited.
    """
    begin, end = span
    if begin + 1 >= end:
        return False
    match = HASH_LINE_PATTERN.match(lines[begin + 1].strip())
    if match is None:
        return False
    body = "\n".join(line.rstrip("\r\n") for line in lines[begin + 2 : end])
    return content_hash(body) != match.group(1)


def protected_lines(lines: list[str]) -> set[int]:
    """
    0-based indexes of lines setupkit owns or has already superseded.

    These lines are excluded when scanning for user conflicts.
    """
    protected: set[int] = set()
    span = find_block(lines)
    if span is not None:
        protected.update(range(span[0], span[1] + 1))

    open_at: int | None = None
    for i, line in enumerate(lines):
        stripped = line.strip()
        if open_at is None and SUPERSEDED_OPEN_PATTERN.match(stripped):
            open_at = i
        elif open_at is not None and SUPERSEDED_CLOSE_PATTERN.match(stripped):
            protected.update(range(open_at, i + 1))
            open_at = None
    return protected
