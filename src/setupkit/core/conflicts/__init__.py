"""
Conflict detection and resolution for the configuration document.

Example:
    >>> from setupkit.core.conflicts import detect_conflicts, resolve
    >>> report = detect_conflicts(text)
    >>> new_text = resolve(text, report, Resolution.MERGE, content)
"""

from .detector import BLOCK_PATTERN_ID, DEFAULT_PATTERNS, detect_conflicts
from .models import Conflict, ConflictPattern, ConflictReport
from .resolver import merge_separator, render_block, resolve, supersede_regions

__all__ = [
    "BLOCK_PATTERN_ID",
    "DEFAULT_PATTERNS",
    "Conflict",
    "ConflictPattern",
    "ConflictReport",
    "detect_conflicts",
    "merge_separator",
    "render_block",
    "resolve",
    "supersede_regions",
]
