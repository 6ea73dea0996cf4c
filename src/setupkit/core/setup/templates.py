"""Access to the content files shipped in setupkit/templates."""

from pathlib import Path

CLAUDE_MD_TEMPLATE = "claude-md.md"
GIT_HOOK_TEMPLATES = {
    "pre-commit": "git-hooks/pre-commit",
    "pre-push": "git-hooks/pre-push",
}


def get_templates_dir() -> Path:
    """Get the templates directory from the setupkit package."""
    import setupkit

    templates_dir = Path(setupkit.__file__).parent / "templates"
    if templates_dir.is_dir():
        return templates_dir
    raise FileNotFoundError("Could not locate setupkit templates directory")


def load_template(name: str) -> str:
    """Read a template by its path relative to the templates directory."""
    return (get_templates_dir() / name).read_text(encoding="utf-8")
