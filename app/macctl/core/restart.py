"""Coalesced restarts of system processes after preference changes.

Many preference domains only take effect once the process that owns them
is restarted. Changes are tracked during a run and each affected process
is restarted at most once per flush.
"""

import logging
import subprocess
from collections.abc import Callable

from macctl.utils.shell import run_command

logger = logging.getLogger(__name__)

# Preference domain -> process that must be restarted to pick it up
DOMAIN_TO_PROCESS: dict[str, str] = {
    "com.apple.dock": "Dock",
    "com.apple.finder": "Finder",
    "com.apple.systemuiserver": "SystemUIServer",
    "com.apple.menuextra.clock": "SystemUIServer",
    "NSGlobalDomain": "SystemUIServer",
    "com.apple.screencapture": "SystemUIServer",
    "com.apple.Safari": "Safari",
    "com.apple.ActivityMonitor": "Activity Monitor",
    "com.apple.TextEdit": "TextEdit",
    "com.apple.MobileSMS": "Messages",
    "com.apple.iphonesimulator": "Simulator",
    "com.apple.dt.Xcode": "Xcode",
    "com.apple.TimeMachine": "SystemUIServer",
    # Trackpad changes need a re-login; SystemUIServer picks up some of them
    "com.apple.AppleMultitouchTrackpad": "SystemUIServer",
}


def restart_process(name: str) -> bool:
    """Restart a process by killing it (launchd relaunches system processes).

    Args:
        name: Process name as understood by ``killall``.

    Returns:
        True if killall succeeded. A process that was not running is not
        an error worth surfacing, so failures are only logged.
    """
    try:
        result = run_command(["killall", name], timeout=15.0)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("Could not restart %s: %s", name, e)
        return False

    if not result.success:
        logger.debug("killall %s failed: %s", name, result.error_text)
    return result.success


class RestartCoalescer:
    """Collects processes to restart and restarts each one once per flush.

    Example:
        >>> coalescer = RestartCoalescer()
        >>> coalescer.track("com.apple.dock")
        >>> coalescer.track("com.apple.dock")
        >>> coalescer.flush()
        ['Dock']
    """

    def __init__(self, restart: Callable[[str], object] | None = None) -> None:
        """Initialize the coalescer.

        Args:
            restart: Callable restarting one process; defaults to restart_process.
        """
        self._restart = restart if restart is not None else restart_process
        self._pending: dict[str, None] = {}

    @property
    def pending(self) -> tuple[str, ...]:
        """Processes awaiting restart, in first-tracked order."""
        return tuple(self._pending)

    def track(self, domain: str) -> str | None:
        """Record that a preference domain changed.

        Args:
            domain: Preference domain that was written or deleted.

        Returns:
            The process that will be restarted, or None for unmapped domains.
        """
        process = DOMAIN_TO_PROCESS.get(domain)
        if process is not None:
            self._pending.setdefault(process, None)
        return process

    def request(self, process: str) -> None:
        """Schedule a process restart directly."""
        self._pending.setdefault(process, None)

    def flush(self) -> list[str]:
        """Restart every pending process once and clear the pending set.

        Returns:
            Names of the processes a restart was attempted for.
        """
        restarted: list[str] = []
        for process in self._pending:
            logger.debug("Restarting %s", process)
            try:
                self._restart(process)
            except Exception as e:
                logger.debug("Restart of %s raised: %s", process, e)
            restarted.append(process)
        self._pending.clear()
        return restarted

    def reset(self) -> None:
        """Forget pending restarts without performing them."""
        self._pending.clear()
