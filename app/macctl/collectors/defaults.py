"""Preference collector reading keys through ``defaults read``.

Only keys that are declared, or that were declared on a previous run
(according to the persisted record), are read. A key that cannot be read
is absent from the result.
"""

from __future__ import annotations

import logging
import subprocess
from typing import TYPE_CHECKING, Any

from macctl.collectors.base import Collector
from macctl.core.values import parse_defaults_output
from macctl.models.state import ResourceKind
from macctl.utils.shell import command_exists, run_command

if TYPE_CHECKING:
    from macctl.core.record import PersistedRecord
    from macctl.models.config import DesiredConfig, SettingIdentity

logger = logging.getLogger(__name__)


class DefaultsCollector(Collector):
    """Collector for macOS preference values."""

    @property
    def kind(self) -> ResourceKind:
        """Return SETTING as the resource kind."""
        return ResourceKind.SETTING

    def is_available(self) -> bool:
        """Check if the defaults tool is available."""
        return command_exists("defaults")

    def collect(self, config: DesiredConfig, record: PersistedRecord) -> dict[str, Any]:
        """Read every declared and previously recorded preference key.

        Returns:
            Mapping of ``domain:key`` to the parsed value.
        """
        identities: dict[SettingIdentity, None] = dict.fromkeys(config.setting_identities())
        identities.update(dict.fromkeys(record.settings))

        observed: dict[str, Any] = {}
        for identity in identities:
            value = self.read(identity.domain, identity.key)
            if value is not None:
                observed[identity.composite] = value
        return observed

    def read(self, domain: str, key: str) -> Any:
        """Read one preference key.

        Args:
            domain: Preference domain.
            key: Preference key.

        Returns:
            Parsed value, or None when the key does not exist.
        """
        try:
            result = run_command(["defaults", "read", domain, key])
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug("defaults read %s %s failed: %s", domain, key, e)
            return None

        if not result.success or not result.stdout.strip():
            return None
        return parse_defaults_output(result.stdout)
