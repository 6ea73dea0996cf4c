"""Persisted setup progress: models and JSON store."""

from .models import (
    FEATURE_NAMES,
    FeatureToggles,
    GitHookToggles,
    Resolution,
    Scope,
    SetupState,
)
from .store import StateStore

__all__ = [
    "FEATURE_NAMES",
    "FeatureToggles",
    "GitHookToggles",
    "Resolution",
    "Scope",
    "SetupState",
    "StateStore",
]
