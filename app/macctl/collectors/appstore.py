"""Mac App Store collector using the ``mas`` command line tool."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from macctl.collectors.base import CollectionError, Collector
from macctl.models.state import ResourceKind
from macctl.utils.shell import command_exists, run_command

if TYPE_CHECKING:
    from macctl.core.record import PersistedRecord
    from macctl.models.config import DesiredConfig

logger = logging.getLogger(__name__)

# "497799835  Xcode  (15.2)"; search results may omit the version
_MAS_LINE = re.compile(r"^\s*(\d+)\s+(.+?)\s*(?:\(([^)]*)\))?\s*$")


@dataclass(frozen=True, slots=True)
class AppStoreListing:
    """One line of ``mas list`` or ``mas search`` output."""

    id: int
    name: str
    version: str | None = None


def parse_mas_output(output: str) -> list[AppStoreListing]:
    """Parse ``mas list`` / ``mas search`` output.

    Args:
        output: Raw command output.

    Returns:
        Listings in output order; unparsable lines are skipped.
    """
    listings: list[AppStoreListing] = []
    for line in output.splitlines():
        match = _MAS_LINE.match(line)
        if match is None:
            continue
        app_id, name, version = match.groups()
        listings.append(AppStoreListing(id=int(app_id), name=name.strip(), version=version))
    return listings


class AppStoreCollector(Collector):
    """Collector for installed Mac App Store apps."""

    @property
    def kind(self) -> ResourceKind:
        """Return APPSTORE as the resource kind."""
        return ResourceKind.APPSTORE

    def is_available(self) -> bool:
        """Check if mas is available."""
        return command_exists("mas")

    def collect(self, config: DesiredConfig, record: PersistedRecord) -> dict[int, str]:
        """List installed App Store apps.

        Raises:
            CollectionError: If ``mas list`` fails.
        """
        result = run_command(["mas", "list"])
        if not result.success:
            msg = f"mas list failed: {result.error_text}"
            raise CollectionError(msg)

        return {listing.id: listing.name for listing in parse_mas_output(result.stdout)}


def search_app_store(query: str) -> list[AppStoreListing]:
    """Search the Mac App Store.

    Args:
        query: Search term.

    Returns:
        Matching listings, best match first.

    Raises:
        CollectionError: If mas is missing or the search fails.
    """
    if not command_exists("mas"):
        msg = "mas is not installed (brew install mas)"
        raise CollectionError(msg)

    result = run_command(["mas", "search", query])
    if not result.success:
        # mas exits non-zero when nothing matches
        if "no results" in result.error_text.lower():
            return []
        msg = f"mas search failed: {result.error_text}"
        raise CollectionError(msg)

    return parse_mas_output(result.stdout)
