"""Typed difference between desired and observed state.

A Diff holds one tuple of entries per resource kind plus an optional
single wallpaper entry. Entries are immutable; the apply orchestrator
dispatches every entry whose action is not NONE.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from macctl.models.config import ValueType
from macctl.models.state import ResourceKind


class DiffAction(Enum):
    """What has to happen to bring one item to its desired state.

    Attributes:
        ADD: Item is desired but not present.
        UPDATE: Item is present but differs (or must be regenerated).
        REMOVE: Item is present but no longer desired.
        NONE: Item already matches.
    """

    ADD = "add"
    UPDATE = "update"
    REMOVE = "remove"
    NONE = "none"


@dataclass(frozen=True, slots=True)
class PackageDiff:
    """Diff entry for a Homebrew formula or cask.

    Attributes:
        action: Required action.
        name: Formula or cask name.
        kind: PACKAGE for formulae, CASK for casks.
        current_version: Installed version, when installed.
    """

    action: DiffAction
    name: str
    kind: ResourceKind = ResourceKind.PACKAGE
    current_version: str | None = None

    @property
    def label(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class AppStoreDiff:
    """Diff entry for a Mac App Store app."""

    action: DiffAction
    id: int
    name: str

    kind = ResourceKind.APPSTORE

    @property
    def label(self) -> str:
        return f"{self.name} ({self.id})"


@dataclass(frozen=True, slots=True)
class SettingDiff:
    """Diff entry for a preference key.

    Attributes:
        action: Required action.
        domain: Preference domain.
        key: Preference key.
        current_value: Observed value, when present.
        desired_value: Declared value (absent for removals).
        value_type: Wire type used to write the desired value.
    """

    action: DiffAction
    domain: str
    key: str
    current_value: Any = None
    desired_value: Any = None
    value_type: ValueType | None = None

    kind = ResourceKind.SETTING

    @property
    def label(self) -> str:
        return f"{self.domain} {self.key}"


@dataclass(frozen=True, slots=True)
class GitDiff:
    """Diff entry for a git config key."""

    action: DiffAction
    scope: str
    key: str
    current_value: str | None = None
    desired_value: str | None = None

    kind = ResourceKind.GIT

    @property
    def label(self) -> str:
        return f"{self.scope} {self.key}"


@dataclass(frozen=True, slots=True)
class FileDiff:
    """Diff entry for a managed dotfile.

    Attributes:
        action: ADD when no symlink exists, otherwise UPDATE.
        source: Declared source path (relative to the config file).
        target: Declared target path, as written in the config.
        current_target: Where the existing symlink currently points.
        expected_target: Where the symlink will point after apply.
        backup: Whether an existing regular file is backed up first.
    """

    action: DiffAction
    source: str
    target: str
    current_target: str | None = None
    expected_target: str | None = None
    backup: bool = False

    kind = ResourceKind.FILE

    @property
    def label(self) -> str:
        return self.target

    @property
    def relinks(self) -> bool:
        """True when the existing symlink points somewhere other than expected."""
        return (
            self.current_target is not None
            and self.expected_target is not None
            and self.current_target != self.expected_target
        )


@dataclass(frozen=True, slots=True)
class DockDiff:
    """Diff entry for one persistent Dock app."""

    action: DiffAction
    name: str
    bundle_path: str | None = None
    position: int | None = None

    kind = ResourceKind.DOCK

    @property
    def label(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class WallpaperDiff:
    """Single wallpaper change from ``from_path`` (if known) to ``to_path``."""

    to_path: str
    from_path: str | None = None

    kind = ResourceKind.WALLPAPER

    @property
    def action(self) -> DiffAction:
        return DiffAction.ADD if self.from_path is None else DiffAction.UPDATE

    @property
    def label(self) -> str:
        return self.to_path


DiffEntry = PackageDiff | AppStoreDiff | SettingDiff | GitDiff | FileDiff | DockDiff | WallpaperDiff


@dataclass(frozen=True, slots=True)
class Diff:
    """Result of comparing desired state with observed state.

    Within a kind, add/update/none entries follow declared order and
    remove entries come last. No cross-kind order is implied here; the
    orchestrator imposes one.
    """

    packages: tuple[PackageDiff, ...] = ()
    casks: tuple[PackageDiff, ...] = ()
    apps: tuple[AppStoreDiff, ...] = ()
    settings: tuple[SettingDiff, ...] = ()
    git: tuple[GitDiff, ...] = ()
    files: tuple[FileDiff, ...] = ()
    wallpaper: WallpaperDiff | None = None

    def sections(self) -> Iterator[tuple[str, tuple[DiffEntry, ...]]]:
        """Iterate over (section name, entries) pairs."""
        yield "packages", self.packages
        yield "casks", self.casks
        yield "apps", self.apps
        yield "settings", self.settings
        yield "git", self.git
        yield "files", self.files

    def changes(self) -> list[DiffEntry]:
        """All entries whose action is not NONE, plus the wallpaper entry."""
        pending: list[DiffEntry] = [
            entry
            for _, entries in self.sections()
            for entry in entries
            if entry.action != DiffAction.NONE
        ]
        if self.wallpaper is not None:
            pending.append(self.wallpaper)
        return pending

    @property
    def has_differences(self) -> bool:
        """Check whether anything needs to be applied."""
        return bool(self.changes())

    @property
    def total_changes(self) -> int:
        """Number of entries that need to be applied."""
        return len(self.changes())

    def count(self, action: DiffAction) -> int:
        """Count entries with the given action across all kinds."""
        total = sum(
            1 for _, entries in self.sections() for entry in entries if entry.action == action
        )
        if self.wallpaper is not None and self.wallpaper.action == action:
            total += 1
        return total

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the diff.
        """
        result: dict[str, object] = {
            "in_sync": not self.has_differences,
            "summary": {
                action.value: self.count(action)
                for action in (DiffAction.ADD, DiffAction.UPDATE, DiffAction.REMOVE)
            },
        }
        for name, entries in self.sections():
            result[name] = [_entry_to_dict(entry) for entry in entries]
        result["wallpaper"] = (
            None
            if self.wallpaper is None
            else {"from": self.wallpaper.from_path, "to": self.wallpaper.to_path}
        )
        return result


def _entry_to_dict(entry: DiffEntry) -> dict[str, Any]:
    """Convert a diff entry to a dictionary, dropping empty fields.

    Args:
        entry: The entry to convert.

    Returns:
        Dictionary with the action plus every non-None field.
    """
    result: dict[str, Any] = {"action": entry.action.value}
    for name in entry.__dataclass_fields__:
        if name == "action":
            continue
        value = getattr(entry, name)
        if value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        result[name] = value
    return result
