"""
setupkit - Configuration merge & resume tool

Installs model tiering guidance, hooks and related settings into a Claude Code
configuration through a resumable, step-by-step setup.
"""

__version__ = "0.4.0-dev"

# Re-export core models for convenience
from setupkit.core.config.models import SetupkitConfig
from setupkit.core.state.models import FeatureToggles, Resolution, Scope, SetupState

__all__ = [
    "FeatureToggles",
    "Resolution",
    "Scope",
    "SetupState",
    "SetupkitConfig",
    "__version__",
]
