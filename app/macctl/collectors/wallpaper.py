"""Wallpaper collector using AppleScript via ``osascript``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from macctl.collectors.base import CollectionError, Collector
from macctl.models.state import ResourceKind
from macctl.utils.shell import command_exists, run_command

if TYPE_CHECKING:
    from macctl.core.record import PersistedRecord
    from macctl.models.config import DesiredConfig

GET_WALLPAPER_SCRIPT = """
tell application "System Events"
    tell every desktop
        get picture
    end tell
end tell
"""


class WallpaperCollector(Collector):
    """Collector for the current desktop picture of the first desktop."""

    @property
    def kind(self) -> ResourceKind:
        """Return WALLPAPER as the resource kind."""
        return ResourceKind.WALLPAPER

    def is_available(self) -> bool:
        """Check if osascript is available."""
        return command_exists("osascript")

    def collect(self, config: DesiredConfig, record: PersistedRecord) -> str | None:
        """Read the current wallpaper path; None when not managed or unknown.

        Raises:
            CollectionError: If osascript fails.
        """
        if config.macos.wallpaper is None:
            return None

        result = run_command(["osascript", "-e", GET_WALLPAPER_SCRIPT])
        if not result.success:
            msg = f"Failed to read current wallpaper: {result.error_text}"
            raise CollectionError(msg)

        # One path per desktop, comma separated
        first = result.stdout.strip().split(", ")[0]
        return first or None
