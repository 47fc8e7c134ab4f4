"""Git configuration collector."""

from __future__ import annotations

import logging
import subprocess
from typing import TYPE_CHECKING

from macctl.collectors.base import Collector
from macctl.models.state import ResourceKind
from macctl.utils.shell import command_exists, run_command

if TYPE_CHECKING:
    from macctl.core.record import PersistedRecord
    from macctl.models.config import DesiredConfig

logger = logging.getLogger(__name__)


class GitCollector(Collector):
    """Collector for declared git config keys.

    ``git config --get`` exits with 1 for an unset key; such keys are
    simply absent from the result.
    """

    @property
    def kind(self) -> ResourceKind:
        """Return GIT as the resource kind."""
        return ResourceKind.GIT

    def is_available(self) -> bool:
        """Check if git is available."""
        return command_exists("git")

    def collect(self, config: DesiredConfig, record: PersistedRecord) -> dict[str, str]:
        """Read every declared git config key.

        Returns:
            Mapping of ``scope.key`` to the current value.
        """
        observed: dict[str, str] = {}
        for setting in config.git.settings:
            try:
                result = run_command(["git", "config", f"--{setting.scope}", "--get", setting.key])
            except (OSError, subprocess.TimeoutExpired) as e:
                logger.debug("git config --get %s failed: %s", setting.key, e)
                continue
            if result.success:
                observed[setting.identity] = result.stdout.strip()
        return observed
