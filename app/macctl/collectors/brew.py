"""Homebrew collectors for installed formulae and casks.

Both use ``brew list --versions``, which prints one ``name version...``
line per installed package.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from macctl.collectors.base import CollectionError, Collector
from macctl.models.state import ResourceKind
from macctl.utils.shell import command_exists, run_command

if TYPE_CHECKING:
    from macctl.core.record import PersistedRecord
    from macctl.models.config import DesiredConfig

logger = logging.getLogger(__name__)


def parse_brew_versions(output: str) -> dict[str, str]:
    """Parse ``brew list --versions`` output.

    Args:
        output: Raw command output.

    Returns:
        Mapping of package name to its newest listed version. Packages
        listed without a version map to an empty string.
    """
    installed: dict[str, str] = {}
    for line in output.splitlines():
        parts = line.split()
        if not parts:
            continue
        installed[parts[0]] = parts[-1] if len(parts) > 1 else ""
    return installed


class BrewCollector(Collector):
    """Collector for installed Homebrew formulae (or casks).

    Attributes:
        cask: Collect casks instead of formulae.
    """

    # Homebrew can be slow when it auto-updates its metadata
    _BREW_TIMEOUT: float = 120.0

    def __init__(self, cask: bool = False) -> None:
        self.cask = cask

    @property
    def kind(self) -> ResourceKind:
        """Return CASK or PACKAGE depending on mode."""
        return ResourceKind.CASK if self.cask else ResourceKind.PACKAGE

    def is_available(self) -> bool:
        """Check if brew is available."""
        return command_exists("brew")

    def collect(self, config: DesiredConfig, record: PersistedRecord) -> dict[str, str]:
        """List installed formulae or casks with their versions.

        Raises:
            CollectionError: If ``brew list`` fails.
        """
        flag = "--cask" if self.cask else "--formula"
        result = run_command(["brew", "list", flag, "--versions"], timeout=self._BREW_TIMEOUT)
        if not result.success:
            msg = f"brew list {flag} failed: {result.error_text}"
            raise CollectionError(msg)

        installed = parse_brew_versions(result.stdout)
        logger.debug("Found %d installed %s", len(installed), "casks" if self.cask else "formulae")
        return installed
