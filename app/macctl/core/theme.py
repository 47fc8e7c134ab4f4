"""Console colours for macctl.

Each ThemeColors field is a Rich style name; ``theme.toml`` in the config
directory may override any subset under a ``[colors]`` table.
"""

import logging
import re
import tomllib
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from macctl.core.paths import get_theme_path

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}")

# Styles rendered bold on top of their colour
_BOLD_STYLES = frozenset({"header", "error"})


class ThemeColors(BaseModel):
    """Hex colour per console style (#RGB or #RRGGBB)."""

    model_config = ConfigDict(extra="forbid")

    header: str = "#69B9A1"
    border: str = "#29526d"
    muted: str = "#b2bec3"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    # Diff actions
    added: str = "#c1ff62"
    removed: str = "#f53263"
    changed: str = "#0e8ac8"

    # Setting domains, git scopes and file targets
    identity: str = "#69B9A1"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, v: object, info: Any) -> str:
        if not isinstance(v, str) or not _HEX_COLOR.fullmatch(v.strip()):
            msg = f"{info.field_name}: expected #RGB or #RRGGBB, got {v!r}"
            raise ValueError(msg)
        return v.strip()


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Read the ``[colors]`` table of a theme file.

    Returns:
        String-valued colours, or None when the file is missing or unreadable.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return None

    colors_raw: object = data.get("colors", {})
    if not isinstance(colors_raw, dict):
        logger.warning("Invalid 'colors' section in %s", path)
        return None
    return {
        key: value
        for key, value in cast(dict[str, object], colors_raw).items()
        if isinstance(value, str)
    }


def load_theme(path: Path | None = None) -> ThemeColors:
    """Load theme colours, applying user overrides when present.

    Args:
        path: Theme file. Defaults to ~/.config/macctl/theme.toml.

    Returns:
        ThemeColors; defaults when the override is missing or invalid.
    """
    theme_path = path or get_theme_path()
    user_colors = _load_toml_colors(theme_path)
    if not user_colors:
        return ThemeColors()

    try:
        return ThemeColors(**user_colors)
    except ValidationError as e:
        logger.warning("Theme validation failed, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme, one style per ThemeColors field."""
    colors = colors or load_theme()
    return Theme(
        {
            name: f"bold {color}" if name in _BOLD_STYLES else color
            for name, color in colors.model_dump().items()
        }
    )


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Return the Rich theme, loading it on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme
