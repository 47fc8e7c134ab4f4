"""Observed-state collection.

Runs every collector and assembles an ObservedState. A collector that is
unavailable or fails degrades its resource kind to "nothing observed";
collection never aborts a run.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from macctl.collectors.base import CollectionError
from macctl.models.state import ObservedState, ResourceKind
from macctl.utils.formatting import print_warning

if TYPE_CHECKING:
    from macctl.collectors.base import Collector
    from macctl.core.record import PersistedRecord
    from macctl.models.config import DesiredConfig

logger = logging.getLogger(__name__)

# ObservedState field filled by each resource kind
KIND_TO_FIELD: dict[ResourceKind, str] = {
    ResourceKind.PACKAGE: "packages",
    ResourceKind.CASK: "casks",
    ResourceKind.APPSTORE: "apps",
    ResourceKind.SETTING: "settings",
    ResourceKind.GIT: "git",
    ResourceKind.FILE: "symlinks",
    ResourceKind.DOCK: "dock_apps",
    ResourceKind.WALLPAPER: "wallpaper",
}

# Tools users have to install themselves, shown with the warning
_INSTALL_HINTS: dict[ResourceKind, str] = {
    ResourceKind.APPSTORE: "brew install mas",
    ResourceKind.DOCK: "brew install dockutil",
}


def _is_declared(kind: ResourceKind, config: DesiredConfig) -> bool:
    """True if the config declares anything of the given kind."""
    if kind == ResourceKind.DOCK:
        return bool(config.macos.dock_apps)
    if kind == ResourceKind.WALLPAPER:
        return config.macos.wallpaper is not None
    declared: dict[ResourceKind, list[Any]] = {
        ResourceKind.PACKAGE: config.brew.packages,
        ResourceKind.CASK: config.brew.casks,
        ResourceKind.APPSTORE: config.appstore.apps,
        ResourceKind.SETTING: config.macos.settings,
        ResourceKind.GIT: config.git.settings,
        ResourceKind.FILE: config.files,
    }
    return bool(declared.get(kind))


def collect_observed(
    config: DesiredConfig,
    record: PersistedRecord,
    collectors: Iterable[Collector],
) -> ObservedState:
    """Collect the observed state of the machine.

    Args:
        config: Desired configuration.
        record: Persisted record of previously managed settings.
        collectors: Collectors to run, at most one per resource kind.

    Returns:
        ObservedState with every kind filled in, possibly empty.
    """
    fields: dict[str, Any] = {}

    for collector in collectors:
        kind = collector.kind

        if not collector.is_available():
            logger.debug("Collector for %s is not available", kind.value)
            if _is_declared(kind, config):
                hint = _INSTALL_HINTS.get(kind)
                suffix = f" (install with: {hint})" if hint else ""
                print_warning(f"Cannot read {kind.value} state: tool not available{suffix}")
            continue

        try:
            fields[KIND_TO_FIELD[kind]] = collector.collect(config, record)
        except (CollectionError, OSError, subprocess.TimeoutExpired) as e:
            logger.warning("Collecting %s state failed: %s", kind.value, e)
            print_warning(f"Could not read {kind.value} state: {e}")

    return ObservedState(**fields)
