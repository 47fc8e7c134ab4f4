"""End-to-end convergence against an in-memory machine.

Applying a diff with operators that faithfully mutate the machine must
leave nothing to do on the next run.
"""

from dataclasses import dataclass, field
from typing import Any

import pytest
from macctl.core.diff import DiffEngine, diff_dock_apps
from macctl.core.orchestrator import ApplyOrchestrator
from macctl.core.record import PersistedRecord
from macctl.core.restart import RestartCoalescer
from macctl.core.values import infer_type
from macctl.models.config import DesiredConfig, SettingIdentity
from macctl.models.diff import DiffAction, DiffEntry
from macctl.models.result import ApplyResult
from macctl.models.state import ObservedState, ResourceKind
from macctl.operators.base import Operator


@dataclass
class FakeMachine:
    """Mutable in-memory stand-in for a workstation."""

    packages: dict[str, str] = field(default_factory=dict)
    casks: dict[str, str] = field(default_factory=dict)
    apps: dict[int, str] = field(default_factory=dict)
    settings: dict[str, Any] = field(default_factory=dict)
    git: dict[str, str] = field(default_factory=dict)
    dock_apps: list[str] = field(default_factory=list)
    wallpaper: str | None = None

    def observe(self) -> ObservedState:
        return ObservedState(
            packages=dict(self.packages),
            casks=dict(self.casks),
            apps=dict(self.apps),
            settings=dict(self.settings),
            git=dict(self.git),
            dock_apps=tuple(self.dock_apps),
            wallpaper=self.wallpaper,
        )


class MachineOperator(Operator):
    """Operator applying entries to a FakeMachine."""

    def __init__(self, kind: ResourceKind, machine: FakeMachine) -> None:
        self._kind = kind
        self.machine = machine

    @property
    def kind(self) -> ResourceKind:
        return self._kind

    @property
    def tool(self) -> str:
        return "memory"

    def is_available(self) -> bool:
        return True

    def _execute(self, entry: DiffEntry) -> ApplyResult:
        m = self.machine
        removing = entry.action == DiffAction.REMOVE
        if self._kind in (ResourceKind.PACKAGE, ResourceKind.CASK):
            target = m.packages if self._kind == ResourceKind.PACKAGE else m.casks
            if removing:
                target.pop(entry.name)
            else:
                target[entry.name] = "1.0"
        elif self._kind == ResourceKind.APPSTORE:
            if removing:
                m.apps.pop(entry.id)
            else:
                m.apps[entry.id] = entry.name
        elif self._kind == ResourceKind.SETTING:
            composite = SettingIdentity(entry.domain, entry.key).composite
            if removing:
                m.settings.pop(composite)
            else:
                m.settings[composite] = entry.desired_value
        elif self._kind == ResourceKind.GIT:
            m.git[f"{entry.scope}.{entry.key}"] = entry.desired_value
        elif self._kind == ResourceKind.DOCK:
            if removing:
                m.dock_apps.remove(entry.name)
            else:
                m.dock_apps.append(entry.name)
        elif self._kind == ResourceKind.WALLPAPER:
            m.wallpaper = entry.to_path
        return self._success(f"Applied {entry.label}")


@pytest.fixture
def machine() -> FakeMachine:
    """A machine with some drift from the sample config."""
    return FakeMachine(
        packages={"git": "2.44.0", "htop": "3.3.0"},
        casks={"slack": "4.0"},
        apps={409183694: "Keynote"},
        settings={
            "com.apple.dock:tilesize": 36,
            "com.apple.dock:orientation": "left",
            "NSGlobalDomain:AppleShowAllExtensions": True,
        },
        git={"global.user.name": "Old Name"},
        dock_apps=["Music", "Safari"],
        wallpaper="/Library/Desktop Pictures/Old.heic",
    )


def _run(config: DesiredConfig, machine: FakeMachine, record: PersistedRecord):
    diff = DiffEngine(config.model_copy(update={"files": []})).compute_diff(
        machine.observe(), record, strict=True
    )
    operators = {kind: MachineOperator(kind, machine) for kind in ResourceKind}
    report = ApplyOrchestrator(operators, RestartCoalescer(restart=lambda name: None)).apply(
        diff, desired_dock=config.macos.dock_apps, observed_dock=tuple(machine.dock_apps)
    )
    return diff, report


class TestConvergence:
    """Tests that one apply reaches a fixed point."""

    def test_second_run_has_nothing_to_do(
        self, sample_config: DesiredConfig, machine: FakeMachine, dock_record: PersistedRecord
    ) -> None:
        """After one apply the next diff is empty."""
        first, report = _run(sample_config, machine, dock_record)
        assert first.has_differences
        assert not report.has_failures

        record = PersistedRecord.from_identities(sample_config.setting_identities())
        second = DiffEngine(sample_config.model_copy(update={"files": []})).compute_diff(
            machine.observe(), record, strict=True
        )

        assert not second.has_differences
        assert diff_dock_apps(sample_config.macos.dock_apps or [], machine.dock_apps) == ()

    def test_dropped_setting_is_removed(
        self, sample_config: DesiredConfig, machine: FakeMachine, dock_record: PersistedRecord
    ) -> None:
        """A recorded key no longer declared is deleted from the machine."""
        _run(sample_config, machine, dock_record)

        assert "com.apple.dock:orientation" not in machine.settings
        assert machine.settings["com.apple.dock:autohide"] is True

    def test_strict_removes_undeclared_packages(
        self, sample_config: DesiredConfig, machine: FakeMachine, empty_record: PersistedRecord
    ) -> None:
        """Strict mode converges installed packages to exactly the declared set."""
        _run(sample_config, machine, empty_record)

        assert set(machine.packages) == {"git", "wget"}
        assert set(machine.casks) == {"firefox"}
        assert set(machine.apps) == {497799835}

    def test_written_values_match_declared_types(
        self, sample_config: DesiredConfig, machine: FakeMachine, empty_record: PersistedRecord
    ) -> None:
        """Updated settings carry the declared value and its inferred type."""
        diff, _ = _run(sample_config, machine, empty_record)

        tilesize = next(s for s in diff.settings if s.key == "tilesize")
        assert tilesize.action == DiffAction.UPDATE
        assert tilesize.value_type == infer_type(48)
        assert machine.settings["com.apple.dock:tilesize"] == 48
