"""Apply orchestration.

The orchestrator executes a Diff against the registered operators in a
fixed order, one entry at a time, and collects an ordered result log.
A failing entry never stops the run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING

from macctl.core.diff import diff_dock_apps
from macctl.core.restart import RestartCoalescer
from macctl.models.diff import DiffAction, SettingDiff
from macctl.models.result import ApplyResult, summarize_results
from macctl.models.state import ResourceKind

if TYPE_CHECKING:
    from macctl.models.config import DockApp
    from macctl.models.diff import Diff, DiffEntry
    from macctl.models.result import ApplyReport
    from macctl.operators.base import Operator

logger = logging.getLogger(__name__)

ResultCallback = Callable[[ApplyResult], None]


class ApplyOrchestrator:
    """Executes diff entries in dependency order.

    Order: formulae, casks, App Store apps, settings, restart of affected
    processes, Dock app set (followed by one Dock restart), wallpaper, git
    config, managed files.

    Example:
        >>> orchestrator = ApplyOrchestrator(get_operators(config_path))
        >>> report = orchestrator.apply(diff, desired_dock=config.macos.dock_apps)
        >>> print(report.success_count, report.failure_count)
    """

    def __init__(
        self,
        operators: Mapping[ResourceKind, Operator],
        coalescer: RestartCoalescer | None = None,
        on_result: ResultCallback | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            operators: Operator per resource kind.
            coalescer: Restart coalescer; a default one is created if None.
            on_result: Called with every result as soon as it is available.
        """
        self.operators = operators
        self.coalescer = coalescer if coalescer is not None else RestartCoalescer()
        self.on_result = on_result
        self._results: list[ApplyResult] = []
        self._restarted: list[str] = []

    def apply(
        self,
        diff: Diff,
        desired_dock: Sequence[DockApp] | None = None,
        observed_dock: Sequence[str] = (),
    ) -> ApplyReport:
        """Apply a diff.

        Args:
            diff: Diff to apply; NONE entries are skipped.
            desired_dock: Declared Dock apps; None or empty leaves the Dock alone.
            observed_dock: Persistent Dock app labels currently present.

        Returns:
            ApplyReport with every result in execution order.
        """
        self._results = []
        self._restarted = []
        self.coalescer.reset()

        self._run_all(diff.packages)
        self._run_all(diff.casks)
        self._run_all(diff.apps)
        self._run_all(diff.settings)
        self._flush_restarts()

        if desired_dock:
            dock_changes = diff_dock_apps(desired_dock, observed_dock)
            self._run_all(dock_changes)
            if dock_changes:
                self.coalescer.request("Dock")
                self._flush_restarts()

        if diff.wallpaper is not None:
            self._run(diff.wallpaper)
        self._run_all(diff.git)
        self._run_all(diff.files)

        report = summarize_results(self._results, self._restarted)
        logger.debug(
            "Apply finished: %d succeeded, %d failed",
            report.success_count,
            report.failure_count,
        )
        return report

    def _run_all(self, entries: Sequence[DiffEntry]) -> None:
        for entry in entries:
            if entry.action == DiffAction.NONE:
                continue
            self._run(entry)

    def _run(self, entry: DiffEntry) -> None:
        """Dispatch one entry and record its result."""
        operator = self.operators.get(entry.kind)
        if operator is None:
            result = ApplyResult(
                kind=entry.kind,
                success=False,
                message=f"Cannot apply {entry.label}",
                error=f"No operator registered for {entry.kind.value}",
            )
        else:
            try:
                result = operator.execute(entry)
            except Exception as e:
                logger.exception("Operator for %s raised", entry.kind.value)
                result = ApplyResult(
                    kind=entry.kind,
                    success=False,
                    message=f"Failed to apply {entry.label}",
                    error=f"{type(e).__name__}: {e}",
                )

        if isinstance(entry, SettingDiff):
            self.coalescer.track(entry.domain)

        self._results.append(result)
        if self.on_result is not None:
            self.on_result(result)

    def _flush_restarts(self) -> None:
        self._restarted.extend(self.coalescer.flush())
