"""Utility modules for setupkit."""

from .fs import atomic_write_text, read_text_or_none
from .project import find_project_root, get_project_root

__all__ = [
    "atomic_write_text",
    "find_project_root",
    "get_project_root",
    "read_text_or_none",
]
