"""Abstract base class for state collectors.

This module defines the Collector interface that every observed-state
collector must implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from macctl.core.record import PersistedRecord
    from macctl.models.config import DesiredConfig
    from macctl.models.state import ResourceKind


class CollectionError(Exception):
    """Raised when a collector cannot read the state it is responsible for."""


class Collector(ABC):
    """Abstract base class for all observed-state collectors.

    Collectors query one part of the machine (Homebrew, ``defaults``, git
    config, ...) and return a plain mapping describing what is there.
    Collectors only read; they never change the machine.

    Example:
        >>> collector = BrewCollector()
        >>> if collector.is_available():
        ...     installed = collector.collect(config, record)
        ...     print(installed.get("git"))
    """

    @property
    @abstractmethod
    def kind(self) -> ResourceKind:
        """Return the resource kind this collector observes."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the tool this collector depends on is installed.

        Returns:
            True if the collector can be used, False otherwise.
        """

    @abstractmethod
    def collect(self, config: DesiredConfig, record: PersistedRecord) -> Any:
        """Collect the observed state for this resource kind.

        Args:
            config: Desired configuration, used to scope per-key lookups.
            record: Persisted record, used to look up previously managed keys.

        Returns:
            Observed state for this kind (usually a mapping).

        Raises:
            CollectionError: If the state cannot be read.
        """
