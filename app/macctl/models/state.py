"""Observed-state model.

ObservedState is collected fresh on every run and never persisted.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ResourceKind(Enum):
    """Kinds of resources macctl reconciles."""

    PACKAGE = "package"
    CASK = "cask"
    APPSTORE = "appstore"
    SETTING = "setting"
    DOCK = "dock"
    WALLPAPER = "wallpaper"
    GIT = "git"
    FILE = "file"


@dataclass(frozen=True, slots=True)
class ObservedState:
    """What the machine currently looks like, per resource kind.

    Attributes:
        packages: Installed formula name -> version.
        casks: Installed cask name -> version.
        apps: Installed App Store id -> app name.
        settings: ``domain:key`` -> parsed preference value.
        git: ``scope.key`` -> configured value (may be empty).
        symlinks: Expanded target path -> symlink source.
        dock_apps: Persistent Dock app labels, in Dock order.
        wallpaper: Current desktop picture path, if known.
    """

    packages: dict[str, str] = field(default_factory=dict)
    casks: dict[str, str] = field(default_factory=dict)
    apps: dict[int, str] = field(default_factory=dict)
    settings: dict[str, Any] = field(default_factory=dict)
    git: dict[str, str] = field(default_factory=dict)
    symlinks: dict[str, str] = field(default_factory=dict)
    dock_apps: tuple[str, ...] = ()
    wallpaper: str | None = None
