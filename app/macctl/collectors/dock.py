"""Dock collector using ``dockutil``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from macctl.collectors.base import CollectionError, Collector
from macctl.models.state import ResourceKind
from macctl.utils.shell import command_exists, run_command

if TYPE_CHECKING:
    from macctl.core.record import PersistedRecord
    from macctl.models.config import DesiredConfig


def parse_dockutil_list(output: str) -> tuple[str, ...]:
    """Extract persistent app labels from ``dockutil --list`` output.

    Each line is tab separated: label, URL, section, plist path, bundle id.
    Recent apps and folders are ignored.

    Args:
        output: Raw command output.

    Returns:
        Labels of persistent Dock apps in Dock order.
    """
    labels: list[str] = []
    for line in output.splitlines():
        if "persistentApps" not in line:
            continue
        label = line.split("\t", 1)[0].strip()
        if label:
            labels.append(label)
    return tuple(labels)


class DockCollector(Collector):
    """Collector for the persistent Dock app list."""

    @property
    def kind(self) -> ResourceKind:
        """Return DOCK as the resource kind."""
        return ResourceKind.DOCK

    def is_available(self) -> bool:
        """Check if dockutil is available."""
        return command_exists("dockutil")

    def collect(self, config: DesiredConfig, record: PersistedRecord) -> tuple[str, ...]:
        """List persistent Dock apps; empty when the Dock is not managed.

        Raises:
            CollectionError: If ``dockutil --list`` fails.
        """
        if not config.macos.dock_apps:
            return ()

        result = run_command(["dockutil", "--list"])
        if not result.success:
            msg = f"dockutil --list failed: {result.error_text}"
            raise CollectionError(msg)
        return parse_dockutil_list(result.stdout)
