"""Diff engine for comparing desired configuration with observed state.

This module provides the DiffEngine class. Computing a diff is pure: it
reads the desired config, the observed state and the persisted record,
and performs no I/O.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from macctl.core.paths import expand_path
from macctl.core.values import infer_type, values_equal
from macctl.models.diff import (
    AppStoreDiff,
    Diff,
    DiffAction,
    DockDiff,
    FileDiff,
    GitDiff,
    PackageDiff,
    SettingDiff,
    WallpaperDiff,
)
from macctl.models.state import ResourceKind

if TYPE_CHECKING:
    from macctl.core.record import PersistedRecord
    from macctl.models.config import (
        AppStoreApp,
        DesiredConfig,
        DockApp,
        GitSetting,
        MacOSSetting,
        ManagedFile,
    )
    from macctl.models.state import ObservedState


class DiffEngine:
    """Engine for computing differences between desired and observed state.

    Example:
        >>> from macctl.core.diff import DiffEngine
        >>> engine = DiffEngine(config, generated_dir=Path("~/.config/macctl/.generated"))
        >>> diff = engine.compute_diff(observed, record, strict=False)
        >>> if not diff.has_differences:
        ...     print("Machine matches config!")
    """

    def __init__(self, config: DesiredConfig, generated_dir: Path | None = None) -> None:
        """Initialize the DiffEngine.

        Args:
            config: The desired configuration.
            generated_dir: Directory generated dotfiles are written to; used
                only to show where file symlinks will point.
        """
        self.config = config
        self.generated_dir = generated_dir

    def compute_diff(
        self,
        observed: ObservedState,
        record: PersistedRecord,
        strict: bool = False,
    ) -> Diff:
        """Compare the desired config against observed state.

        Args:
            observed: Freshly collected observed state.
            record: Settings identities desired as of the last apply.
            strict: Propose removal of formulae, casks and App Store apps
                that are installed but not declared.

        Returns:
            Diff with one entry per declared item, plus removals.
        """
        config = self.config
        return Diff(
            packages=diff_packages(
                config.brew.packages, observed.packages, strict, ResourceKind.PACKAGE
            ),
            casks=diff_packages(config.brew.casks, observed.casks, strict, ResourceKind.CASK),
            apps=diff_appstore_apps(config.appstore.apps, observed.apps, strict),
            settings=diff_settings(config.macos.settings, observed.settings, record),
            git=diff_git_settings(config.git.settings, observed.git),
            files=diff_files(config.files, observed.symlinks, self.generated_dir),
            wallpaper=diff_wallpaper(config.macos.wallpaper, observed.wallpaper),
        )


def diff_packages(
    desired: Sequence[str],
    current: Mapping[str, str],
    strict: bool = False,
    kind: ResourceKind = ResourceKind.PACKAGE,
) -> tuple[PackageDiff, ...]:
    """Diff declared formulae (or casks) against installed ones.

    Declared packages carry no version, so an installed package is always
    NONE; there is no UPDATE.

    Args:
        desired: Declared names, in declared order.
        current: Installed name -> version.
        strict: Also propose removal of installed, undeclared packages.
        kind: PACKAGE or CASK.

    Returns:
        Tuple of PackageDiff entries.
    """
    diffs: list[PackageDiff] = []
    for name in desired:
        if name not in current:
            diffs.append(PackageDiff(action=DiffAction.ADD, name=name, kind=kind))
        else:
            diffs.append(
                PackageDiff(
                    action=DiffAction.NONE,
                    name=name,
                    kind=kind,
                    current_version=current[name],
                )
            )

    if strict:
        wanted = set(desired)
        for name, version in current.items():
            if name not in wanted:
                diffs.append(
                    PackageDiff(
                        action=DiffAction.REMOVE,
                        name=name,
                        kind=kind,
                        current_version=version,
                    )
                )

    return tuple(diffs)


def diff_appstore_apps(
    desired: Sequence[AppStoreApp],
    current: Mapping[int, str],
    strict: bool = False,
) -> tuple[AppStoreDiff, ...]:
    """Diff declared App Store apps against installed ones, by numeric id.

    Args:
        desired: Declared apps, in declared order.
        current: Installed app id -> name.
        strict: Also propose removal of installed, undeclared apps.

    Returns:
        Tuple of AppStoreDiff entries.
    """
    diffs: list[AppStoreDiff] = []
    for app in desired:
        action = DiffAction.NONE if app.id in current else DiffAction.ADD
        diffs.append(AppStoreDiff(action=action, id=app.id, name=app.name))

    if strict:
        wanted = {app.id for app in desired}
        for app_id, name in current.items():
            if app_id not in wanted:
                diffs.append(AppStoreDiff(action=DiffAction.REMOVE, id=app_id, name=name))

    return tuple(diffs)


def diff_settings(
    desired: Sequence[MacOSSetting],
    current: Mapping[str, object],
    record: PersistedRecord,
) -> tuple[SettingDiff, ...]:
    """Diff declared preference keys against observed values.

    Removal is driven by the persisted record, never by observed state:
    preference domains hold many keys macctl never set, so only keys that
    were declared on a previous run and have since been dropped are
    proposed for removal. The strict flag plays no part here.

    Args:
        desired: Declared settings, in declared order.
        current: Observed ``domain:key`` -> value.
        record: Identities desired as of the last apply.

    Returns:
        Tuple of SettingDiff entries.
    """
    diffs: list[SettingDiff] = []
    declared: set[str] = set()

    for setting in desired:
        composite = setting.identity.composite
        declared.add(composite)
        value_type = setting.type or infer_type(setting.value)
        current_value = current.get(composite)

        if current_value is None:
            action = DiffAction.ADD
        elif values_equal(current_value, setting.value):
            action = DiffAction.NONE
        else:
            action = DiffAction.UPDATE

        diffs.append(
            SettingDiff(
                action=action,
                domain=setting.domain,
                key=setting.key,
                current_value=current_value,
                desired_value=setting.value,
                value_type=value_type,
            )
        )

    for identity in record.settings:
        composite = identity.composite
        if composite in declared:
            continue
        current_value = current.get(composite)
        if current_value is None:
            continue
        diffs.append(
            SettingDiff(
                action=DiffAction.REMOVE,
                domain=identity.domain,
                key=identity.key,
                current_value=current_value,
            )
        )

    return tuple(diffs)


def diff_git_settings(
    desired: Sequence[GitSetting],
    current: Mapping[str, str],
) -> tuple[GitDiff, ...]:
    """Diff declared git config keys against observed values.

    ``git config`` cannot tell an unset key from an empty one, so an empty
    observed value counts as absent. Keys are only ever set, never unset.

    Args:
        desired: Declared git settings, in declared order.
        current: Observed ``scope.key`` -> value.

    Returns:
        Tuple of GitDiff entries.
    """
    diffs: list[GitDiff] = []
    for setting in desired:
        current_value = current.get(setting.identity)

        if not current_value:
            diffs.append(
                GitDiff(
                    action=DiffAction.ADD,
                    scope=setting.scope,
                    key=setting.key,
                    desired_value=setting.value,
                )
            )
            continue

        action = DiffAction.NONE if current_value == setting.value else DiffAction.UPDATE
        diffs.append(
            GitDiff(
                action=action,
                scope=setting.scope,
                key=setting.key,
                current_value=current_value,
                desired_value=setting.value,
            )
        )

    return tuple(diffs)


def diff_files(
    desired: Sequence[ManagedFile],
    current: Mapping[str, str],
    generated_dir: Path | None = None,
) -> tuple[FileDiff, ...]:
    """Diff managed dotfiles against existing symlinks.

    File content is regenerated from its source on every run, so an
    existing symlink always yields UPDATE. ``expected_target`` is carried
    for display only and never changes the action.

    Args:
        desired: Declared files, in declared order.
        current: Expanded target path -> current symlink source.
        generated_dir: Directory generated files are written to.

    Returns:
        Tuple of FileDiff entries.
    """
    diffs: list[FileDiff] = []
    for managed in desired:
        target = expand_path(managed.target)
        expected = (
            os.path.join(os.fspath(generated_dir), os.path.basename(target))
            if generated_dir is not None
            else None
        )
        current_target = current.get(target)

        diffs.append(
            FileDiff(
                action=DiffAction.ADD if current_target is None else DiffAction.UPDATE,
                source=managed.source,
                target=managed.target,
                current_target=current_target,
                expected_target=expected,
                backup=managed.backup,
            )
        )

    return tuple(diffs)


def diff_wallpaper(desired: str | None, current: str | None) -> WallpaperDiff | None:
    """Diff the desired wallpaper path against the current one.

    Args:
        desired: Declared wallpaper path, or None when not managed.
        current: Current wallpaper path, if known.

    Returns:
        WallpaperDiff when the paths differ, otherwise None.
    """
    if desired is None:
        return None
    wanted = expand_path(desired)
    if current is not None and expand_path(current) == wanted:
        return None
    return WallpaperDiff(to_path=wanted, from_path=current)


def diff_dock_apps(desired: Iterable[DockApp], current: Sequence[str]) -> tuple[DockDiff, ...]:
    """Reconcile the persistent Dock app set.

    Uses the same add/remove logic as strict package diffing: apps in the
    Dock but not declared are removed first, then declared apps missing
    from the Dock are added.

    Args:
        desired: Declared Dock apps.
        current: Labels of persistent Dock apps, in Dock order.

    Returns:
        Tuple of DockDiff entries (REMOVE entries first, then ADD).
    """
    apps = list(desired)
    wanted = {app.label for app in apps}
    present = set(current)

    diffs: list[DockDiff] = [
        DockDiff(action=DiffAction.REMOVE, name=label) for label in current if label not in wanted
    ]
    for app in apps:
        if app.label not in present:
            diffs.append(
                DockDiff(
                    action=DiffAction.ADD,
                    name=app.label,
                    bundle_path=app.bundle_path,
                    position=app.position,
                )
            )
    return tuple(diffs)
