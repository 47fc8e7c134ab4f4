"""Desired-state configuration file I/O.

This module provides functions for loading and saving the desired-state
configuration. TOML is the default format; a ``.py`` configuration is
executed only when the caller explicitly allows scripts.
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

import tomli_w
from pydantic import ValidationError

from macctl.core.paths import get_config_path
from macctl.models.config import DesiredConfig
from macctl.utils.scripts import ScriptError, load_script


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the configuration file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file cannot be parsed or executed."""


class ConfigValidationError(ConfigError):
    """Raised when the configuration content is invalid."""


def _read_toml(config_path: Path) -> dict[str, Any]:
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e


def _read_script(config_path: Path) -> Any:
    try:
        module = load_script(config_path)
    except ScriptError as e:
        raise ConfigParseError(str(e)) from e

    if not hasattr(module, "config"):
        raise ConfigParseError(f"{config_path.name} must define a module-level 'config'")
    return module.config


def load_config(path: Path | None = None, allow_script: bool = False) -> DesiredConfig:
    """Load and validate the desired-state configuration.

    Args:
        path: Path to the config file. If None, uses the default config path.
        allow_script: Permit loading a ``.py`` config, which executes it.

    Returns:
        Validated DesiredConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the file cannot be parsed or executed.
        ConfigValidationError: If the content doesn't match the schema.
        ConfigError: If a ``.py`` config is given without ``allow_script``.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    if config_path.suffix == ".py":
        if not allow_script:
            raise ConfigError(
                f"{config_path.name} is executable Python; pass --allow-script to load it"
            )
        data = _read_script(config_path)
        if isinstance(data, DesiredConfig):
            return data
    else:
        data = _read_toml(config_path)

    try:
        return DesiredConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid config content: {e}") from e


def save_config(data: dict[str, Any], path: Path | None = None) -> Path:
    """Validate and save a configuration document as TOML.

    The file is written atomically via a temporary file and os.replace().

    Args:
        data: Configuration document (the TOML structure as a dict).
        path: Target path. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigValidationError: If ``data`` is not a valid configuration.
        ConfigError: If the file cannot be written.
    """
    try:
        DesiredConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid config content: {e}") from e

    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def config_exists(path: Path | None = None) -> bool:
    """Check if a configuration file exists.

    Args:
        path: Path to check. If None, uses the default config path.

    Returns:
        True if the config file exists, False otherwise.
    """
    config_path = path or get_config_path()
    return config_path.exists()


def require_config(config_path: Path | None = None, allow_script: bool = False) -> DesiredConfig:
    """Load the config or exit with a helpful error message.

    Args:
        config_path: Optional custom config path.
        allow_script: Permit loading a ``.py`` config.

    Returns:
        Loaded and validated DesiredConfig.

    Raises:
        typer.Exit: If the config cannot be loaded.
    """
    import typer

    from macctl.utils.formatting import print_error, print_info

    path = config_path or get_config_path()
    try:
        return load_config(path, allow_script=allow_script)
    except ConfigNotFoundError as e:
        print_error(f"Config not found: {path}")
        print_info("Run 'macctl init' to create a config from your current machine.")
        raise typer.Exit(code=1) from e
    except ConfigError as e:
        print_error(f"Failed to load config: {e}")
        raise typer.Exit(code=1) from e
