"""Data models for macctl.

This module exports the core data structures used throughout the application.
"""

from macctl.models.config import (
    AppStoreApp,
    DesiredConfig,
    DockApp,
    GitSetting,
    MacOSSetting,
    ManagedFile,
    SettingIdentity,
    SettingValue,
    ValueType,
)
from macctl.models.diff import (
    AppStoreDiff,
    Diff,
    DiffAction,
    DiffEntry,
    DockDiff,
    FileDiff,
    GitDiff,
    PackageDiff,
    SettingDiff,
    WallpaperDiff,
)
from macctl.models.result import ApplyReport, ApplyResult, summarize_results
from macctl.models.state import ObservedState, ResourceKind

__all__ = [
    "AppStoreApp",
    "AppStoreDiff",
    "ApplyReport",
    "ApplyResult",
    "DesiredConfig",
    "Diff",
    "DiffAction",
    "DiffEntry",
    "DockApp",
    "DockDiff",
    "FileDiff",
    "GitDiff",
    "GitSetting",
    "MacOSSetting",
    "ManagedFile",
    "ObservedState",
    "PackageDiff",
    "ResourceKind",
    "SettingDiff",
    "SettingIdentity",
    "SettingValue",
    "ValueType",
    "WallpaperDiff",
    "summarize_results",
]
