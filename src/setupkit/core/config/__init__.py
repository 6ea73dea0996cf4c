"""
Configuration management for setupkit.

Provides layered configuration loading (defaults < user < project < env)
and the well-known file locations used by the setup steps.
"""

from .env import load_env_files
from .loader import (
    clear_cache,
    get_claude_home,
    get_project_config_path,
    get_state_file_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
)
from .models import SetupkitConfig

__all__ = [
    "SetupkitConfig",
    "clear_cache",
    "get_claude_home",
    "get_project_config_path",
    "get_state_file_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
    "load_env_files",
]
