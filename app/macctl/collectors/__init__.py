"""Observed-state collectors.

This module exports the collector classes that read the current state of
the machine, one per resource kind.
"""

from macctl.collectors.appstore import AppStoreCollector, search_app_store
from macctl.collectors.base import CollectionError, Collector
from macctl.collectors.brew import BrewCollector
from macctl.collectors.defaults import DefaultsCollector
from macctl.collectors.dock import DockCollector
from macctl.collectors.files import FileCollector
from macctl.collectors.git import GitCollector
from macctl.collectors.wallpaper import WallpaperCollector


def get_collectors() -> list[Collector]:
    """Get one collector instance per resource kind.

    Returns:
        Collectors in the order their state is read.
    """
    return [
        BrewCollector(),
        BrewCollector(cask=True),
        AppStoreCollector(),
        DefaultsCollector(),
        DockCollector(),
        WallpaperCollector(),
        GitCollector(),
        FileCollector(),
    ]


__all__ = [
    "AppStoreCollector",
    "BrewCollector",
    "CollectionError",
    "Collector",
    "DefaultsCollector",
    "DockCollector",
    "FileCollector",
    "GitCollector",
    "WallpaperCollector",
    "get_collectors",
    "search_app_store",
]
