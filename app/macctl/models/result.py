"""Apply results and run summary.

This module defines the outcome of a single apply step and the aggregate
report the CLI uses for its summary and exit code.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from macctl.models.state import ResourceKind


@dataclass(frozen=True, slots=True)
class ApplyResult:
    """Result of executing one diff entry (or one sub-step of it).

    Attributes:
        kind: Resource kind the step belongs to.
        success: Whether the step completed successfully.
        message: Human-readable description of what happened.
        error: Error details if the step failed.
    """

    kind: ResourceKind
    success: bool
    message: str
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the step failed."""
        return not self.success


@dataclass(frozen=True, slots=True)
class ApplyReport:
    """Ordered result log of one apply run plus its tallies.

    Attributes:
        results: Every result in execution order.
        restarted: Processes restarted by the coalescer.
    """

    results: tuple[ApplyResult, ...]
    restarted: tuple[str, ...] = ()

    @property
    def success_count(self) -> int:
        """Number of successful steps."""
        return sum(1 for r in self.results if r.success)

    @property
    def failure_count(self) -> int:
        """Number of failed steps."""
        return sum(1 for r in self.results if r.failed)

    @property
    def has_failures(self) -> bool:
        """True if any step failed."""
        return self.failure_count > 0

    def failures(self) -> list[ApplyResult]:
        """Failed results in execution order."""
        return [r for r in self.results if r.failed]


def summarize_results(
    results: Iterable[ApplyResult],
    restarted: Iterable[str] = (),
) -> ApplyReport:
    """Build an ApplyReport from a result log.

    Args:
        results: Results in execution order.
        restarted: Processes restarted during the run.

    Returns:
        ApplyReport with success and failure tallies.
    """
    return ApplyReport(results=tuple(results), restarted=tuple(restarted))
