"""XDG-compliant path management for macctl.

This module provides standardized paths following the XDG Base Directory
Specification for the desired configuration, the persisted record and the
colour theme.

XDG defaults:
- Config: ~/.config/macctl/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "macctl"

# Directory (next to the config file) that receives generated dotfiles
GENERATED_DIRNAME = ".generated"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/macctl/ (or XDG_CONFIG_HOME/macctl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_config_path() -> Path:
    """Get the default desired-state configuration file path.

    Returns:
        Path to ~/.config/macctl/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_record_path() -> Path:
    """Get the persisted record file path.

    The record lists the settings identities that were desired as of the
    last successful apply. It lives next to the configuration because it
    describes user intent, not cache data.

    Returns:
        Path to ~/.config/macctl/state.json.
    """
    return get_config_dir() / "state.json"


def get_theme_path() -> Path:
    """Get the user theme override path.

    Returns:
        Path to ~/.config/macctl/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def get_generated_dir(config_path: Path) -> Path:
    """Get the directory that receives generated dotfiles.

    Args:
        config_path: Path of the desired-state configuration file.

    Returns:
        Path to the .generated directory next to the config file.
    """
    return config_path.resolve().parent / GENERATED_DIRNAME


def expand_path(path: str) -> str:
    """Expand a leading ``~`` and make the path absolute.

    Performs no file-system access, so the diff engine can use it.

    Args:
        path: User-supplied path string.

    Returns:
        Absolute, normalized path string.
    """
    return os.path.abspath(os.path.expanduser(path))

