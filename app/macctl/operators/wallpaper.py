"""Wallpaper operator using AppleScript via ``osascript``."""

import os

from macctl.models.diff import WallpaperDiff
from macctl.models.result import ApplyResult
from macctl.models.state import ResourceKind
from macctl.operators.base import ExecutionError, Operator
from macctl.utils.shell import command_exists, run_command

SET_WALLPAPER_SCRIPT = """
tell application "System Events"
    tell every desktop
        set picture to "{path}"
    end tell
end tell
"""


class WallpaperOperator(Operator[WallpaperDiff]):
    """Operator setting the desktop picture of every desktop."""

    @property
    def kind(self) -> ResourceKind:
        """Return WALLPAPER as the resource kind."""
        return ResourceKind.WALLPAPER

    @property
    def tool(self) -> str:
        return "osascript"

    def is_available(self) -> bool:
        """Check if osascript is available."""
        return command_exists("osascript")

    def describe(self, entry: WallpaperDiff) -> str:
        return f"set wallpaper to {entry.to_path}"

    def _execute(self, entry: WallpaperDiff) -> ApplyResult:
        if not os.path.isfile(entry.to_path):
            msg = f"Wallpaper file not found: {entry.to_path}"
            raise ExecutionError(msg)

        escaped = entry.to_path.replace("\\", "\\\\").replace('"', '\\"')
        script = SET_WALLPAPER_SCRIPT.format(path=escaped)
        self._check(run_command(["osascript", "-e", script]), "osascript")
        return self._success(f"Set wallpaper to {entry.to_path}")
