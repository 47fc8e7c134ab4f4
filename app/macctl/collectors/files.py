"""Symlink collector for managed dotfiles."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from macctl.collectors.base import CollectionError, Collector
from macctl.core.paths import expand_path
from macctl.models.state import ResourceKind

if TYPE_CHECKING:
    from macctl.core.record import PersistedRecord
    from macctl.models.config import DesiredConfig


class FileCollector(Collector):
    """Collector reporting where each managed target currently links to.

    A target that is missing, or that is a regular file, is absent from
    the result.
    """

    @property
    def kind(self) -> ResourceKind:
        """Return FILE as the resource kind."""
        return ResourceKind.FILE

    def is_available(self) -> bool:
        """Symlinks can always be inspected."""
        return True

    def collect(self, config: DesiredConfig, record: PersistedRecord) -> dict[str, str]:
        """Resolve symlinks at every declared target.

        Returns:
            Mapping of expanded target path to the symlink's source.

        Raises:
            CollectionError: If a symlink exists but cannot be read.
        """
        observed: dict[str, str] = {}
        for managed in config.files:
            target = expand_path(managed.target)
            if not os.path.islink(target):
                continue
            try:
                observed[target] = os.readlink(target)
            except OSError as e:
                msg = f"Cannot read symlink {target}: {e}"
                raise CollectionError(msg) from e
        return observed
