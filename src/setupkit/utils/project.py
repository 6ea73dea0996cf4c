"""
Locating the project a local-scope setup applies to.

A project is the nearest directory, walking up from where setupkit was
started, that holds a .git entry or a .setupkit.json file.
"""

from pathlib import Path

PROJECT_ROOT_MARKERS = (".git", ".setupkit.json")


def find_project_root(start: Path | None = None) -> Path | None:
    """
    Walk up from ``start`` (default: cwd) to the first directory with a marker.

    Example:
        >>> find_project_root(Path("/work/app/src/pkg"))
        PosixPath('/work/app')
    """
    here = (start or Path.cwd()).resolve()
    for candidate in (here, *here.parents):
        if any((candidate / name).exists() for name in PROJECT_ROOT_MARKERS):
            return candidate
    return None


def get_project_root(start: Path | None = None) -> Path:
    """
    Project root for ``start``, or ``start`` itself when no marker is found.

    A directory without markers is still a valid target for local setup.
    """
    start = start or Path.cwd()
    return find_project_root(start) or start.resolve()


def find_git_dir(project_root: Path) -> Path | None:
    """
    Locate the git directory for a project root.

    Handles worktrees and submodules, where .git is a file containing
    ``gitdir: <path>``.
    """
    dot_git = project_root / ".git"
    if dot_git.is_dir():
        return dot_git
    if not dot_git.is_file():
        return None

    first_line = dot_git.read_text(encoding="utf-8").partition("\n")[0]
    if not first_line.startswith("gitdir:"):
        return None
    git_dir = Path(first_line.split(":", 1)[1].strip())
    if not git_dir.is_absolute():
        git_dir = (project_root / git_dir).resolve()
    return git_dir if git_dir.is_dir() else None
