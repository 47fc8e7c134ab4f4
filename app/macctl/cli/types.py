"""Shared types and helpers for CLI commands.

The ``apply`` and ``diff`` commands share the same pipeline: load the
config and the record, collect observed state, then compute the diff.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from macctl.collectors import get_collectors
from macctl.core.config import require_config
from macctl.core.diff import DiffEngine, diff_dock_apps
from macctl.core.observe import collect_observed
from macctl.core.paths import get_config_path, get_generated_dir
from macctl.core.record import PersistedRecord, RecordStore
from macctl.models.config import DesiredConfig
from macctl.models.diff import Diff, DockDiff
from macctl.models.state import ObservedState

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to the config file (default: ~/.config/macctl/config.toml).",
    ),
]

StrictOption = Annotated[
    bool,
    typer.Option(
        "--strict",
        help="Also remove installed formulae, casks and App Store apps not in the config.",
    ),
]

AllowScriptOption = Annotated[
    bool,
    typer.Option(
        "--allow-script",
        help="Allow executing a .py config and .py dotfile generators.",
    ),
]


@dataclass(frozen=True, slots=True)
class Plan:
    """Everything a command needs to show or apply a diff.

    Attributes:
        config_path: Path the config was loaded from.
        config: Loaded desired configuration.
        record: Persisted record as of the last apply.
        observed: Freshly collected observed state.
        diff: Computed diff.
        dock_changes: Dock app changes (empty when the Dock is not managed).
    """

    config_path: Path
    config: DesiredConfig
    record: PersistedRecord
    observed: ObservedState
    diff: Diff
    dock_changes: tuple[DockDiff, ...]

    @property
    def has_changes(self) -> bool:
        """True if applying the plan would change anything."""
        return self.diff.has_differences or bool(self.dock_changes)

    @property
    def total_changes(self) -> int:
        """Number of steps applying the plan would run."""
        return self.diff.total_changes + len(self.dock_changes)


def build_plan(
    config_path: Path | None = None,
    strict: bool = False,
    allow_script: bool = False,
    record_store: RecordStore | None = None,
) -> Plan:
    """Load the config, collect observed state and compute the diff.

    Args:
        config_path: Config path; the default config path when None.
        strict: Propose removal of undeclared packages and apps.
        allow_script: Permit executable configuration.
        record_store: Record store; the default location when None.

    Returns:
        Plan with the computed diff.

    Raises:
        typer.Exit: If the config cannot be loaded.
    """
    path = config_path or get_config_path()
    config = require_config(path, allow_script=allow_script)
    store = record_store or RecordStore()
    record = store.load()

    observed = collect_observed(config, record, get_collectors())
    diff = DiffEngine(config, generated_dir=get_generated_dir(path)).compute_diff(
        observed, record, strict=strict
    )
    dock_changes = (
        diff_dock_apps(config.macos.dock_apps, observed.dock_apps)
        if config.macos.dock_apps
        else ()
    )

    return Plan(
        config_path=path,
        config=config,
        record=record,
        observed=observed,
        diff=diff,
        dock_changes=dock_changes,
    )
