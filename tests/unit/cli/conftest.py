"""Shared fixtures for CLI command tests."""

from pathlib import Path

import pytest
from macctl.cli.types import Plan
from macctl.core.diff import DiffEngine, diff_dock_apps
from macctl.core.record import PersistedRecord
from macctl.models.config import DesiredConfig
from macctl.models.diff import DiffEntry
from macctl.models.result import ApplyResult
from macctl.models.state import ObservedState, ResourceKind
from macctl.operators.base import ExecutionError, Operator


def make_plan(
    config: DesiredConfig,
    observed: ObservedState | None = None,
    record: PersistedRecord | None = None,
    config_path: Path = Path("/tmp/macctl/config.toml"),
) -> Plan:
    """Build a Plan the way build_plan does, from in-memory state."""
    observed = observed or ObservedState()
    record = record or PersistedRecord()
    diff = DiffEngine(config, generated_dir=config_path.parent / ".generated").compute_diff(
        observed, record
    )
    dock_changes = (
        diff_dock_apps(config.macos.dock_apps, observed.dock_apps)
        if config.macos.dock_apps
        else ()
    )
    return Plan(
        config_path=config_path,
        config=config,
        record=record,
        observed=observed,
        diff=diff,
        dock_changes=dock_changes,
    )


class FakeOperator(Operator):
    """Operator that succeeds unless the entry label is listed as failing."""

    def __init__(self, kind: ResourceKind, log: list[str], fail_labels: tuple[str, ...] = ()):
        self._kind = kind
        self.log = log
        self.fail_labels = set(fail_labels)

    @property
    def kind(self) -> ResourceKind:
        return self._kind

    @property
    def tool(self) -> str:
        return "fake"

    def is_available(self) -> bool:
        return True

    def _execute(self, entry: DiffEntry) -> ApplyResult:
        self.log.append(entry.label)
        if entry.label in self.fail_labels:
            raise ExecutionError("simulated failure")
        return self._success(f"Applied {entry.label}")


@pytest.fixture
def packages_config() -> DesiredConfig:
    """A config declaring only two formulae."""
    return DesiredConfig.model_validate({"brew": {"packages": ["git", "wget"]}})


@pytest.fixture
def in_sync_plan(packages_config: DesiredConfig) -> Plan:
    """A plan with nothing to do."""
    return make_plan(
        packages_config, ObservedState(packages={"git": "2.44.0", "wget": "1.24.5"})
    )


@pytest.fixture
def pending_plan(packages_config: DesiredConfig) -> Plan:
    """A plan that installs wget."""
    return make_plan(packages_config, ObservedState(packages={"git": "2.44.0"}))


@pytest.fixture
def plan_for():
    """Factory building a Plan from in-memory state."""
    return make_plan


@pytest.fixture
def fake_operator():
    """The FakeOperator class."""
    return FakeOperator
