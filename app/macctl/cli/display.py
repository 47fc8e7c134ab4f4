"""Shared Rich display functions for diffs and apply results.

Provides reusable table builders and summary printers for the ``diff``
and ``apply`` commands.
"""

from collections.abc import Iterable, Sequence
from typing import Any

from rich.markup import escape
from rich.table import Table

from macctl.models.diff import (
    AppStoreDiff,
    DiffAction,
    DiffEntry,
    DockDiff,
    FileDiff,
    GitDiff,
    PackageDiff,
    SettingDiff,
    WallpaperDiff,
)
from macctl.models.result import ApplyReport, ApplyResult
from macctl.utils.formatting import console, print_success

# Status icon and style per action
ACTION_STYLES: dict[DiffAction, tuple[str, str]] = {
    DiffAction.ADD: ("[+]", "added"),
    DiffAction.UPDATE: ("[~]", "changed"),
    DiffAction.REMOVE: ("[-]", "removed"),
    DiffAction.NONE: ("[=]", "muted"),
}


def _short(value: Any, limit: int = 40) -> str:
    """Render a value for a table cell, truncating long text."""
    text = value if isinstance(value, str) else repr(value)
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


def describe_entry(entry: DiffEntry) -> str:
    """Build the details cell for a diff entry.

    Args:
        entry: Diff entry to describe.

    Returns:
        Short human-readable description of the change.
    """
    if isinstance(entry, PackageDiff):
        if entry.action == DiffAction.ADD:
            return "Not installed"
        if entry.action == DiffAction.REMOVE:
            return f"Not in config ({entry.current_version})"
        return f"Installed ({entry.current_version})"

    if isinstance(entry, AppStoreDiff):
        return {
            DiffAction.ADD: "Not installed",
            DiffAction.REMOVE: "Not in config (remove manually)",
        }.get(entry.action, "Installed")

    if isinstance(entry, (SettingDiff, GitDiff)):
        if entry.action == DiffAction.ADD:
            return f"set to {_short(entry.desired_value)}"
        if entry.action == DiffAction.REMOVE:
            return f"delete (was {_short(entry.current_value)})"
        return f"{_short(entry.current_value)} → {_short(entry.desired_value)}"

    if isinstance(entry, FileDiff):
        if entry.action == DiffAction.ADD:
            return f"link → {entry.expected_target or entry.source}"
        if entry.relinks:
            return f"relink {entry.current_target} → {entry.expected_target}"
        return f"regenerate from {entry.source}"

    if isinstance(entry, DockDiff):
        if entry.action == DiffAction.REMOVE:
            return "Not in config"
        return f"position {entry.position}" if entry.position else "Not in Dock"

    if isinstance(entry, WallpaperDiff):
        return f"{entry.from_path or 'unknown'} → {entry.to_path}"

    return ""


def create_diff_table(
    entries: Iterable[DiffEntry],
    title: str = "Configuration Differences",
) -> Table:
    """Create a Rich table listing diff entries.

    Args:
        entries: Entries to show, in display order.
        title: Table title.

    Returns:
        Rich Table configured for diff display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="header",
        border_style="border",
    )
    table.add_column("Status", width=6, justify="center")
    table.add_column("Kind", width=9)
    table.add_column("Item", no_wrap=True)
    table.add_column("Details")

    for entry in entries:
        icon, style = ACTION_STYLES[entry.action]
        table.add_row(
            f"[{style}]{icon}[/{style}]",
            entry.kind.value,
            f"[{style}]{escape(entry.label)}[/{style}]",
            f"[muted]{escape(describe_entry(entry))}[/muted]",
        )

    return table


def create_results_table(results: Sequence[ApplyResult]) -> Table:
    """Create a Rich table displaying apply results.

    Successful results show "OK"; failed results show "FAIL" with the
    error message.

    Args:
        results: Results in execution order.

    Returns:
        Rich Table configured for results display.
    """
    table = Table(
        title="Results",
        show_header=True,
        header_style="header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Kind", width=9)
    table.add_column("Message")

    for result in results:
        if result.success:
            status = "[success]OK[/success]"
            message = result.message
        else:
            status = "[error]FAIL[/error]"
            message = f"{result.message}: {result.error or 'Unknown error'}"

        table.add_row(status, result.kind.value, f"[muted]{escape(message)}[/muted]")

    return table


def format_result_line(result: ApplyResult) -> str:
    """Format one result as a single progress line."""
    if result.success:
        return f"  [success]✓[/success] {escape(result.message)}"
    error = escape(result.error or "Unknown error")
    return f"  [error]✗[/error] {escape(result.message)} [muted]({error})[/muted]"


def print_changes_summary(entries: Sequence[DiffEntry]) -> None:
    """Print counts of pending changes by action.

    If no entries are provided, reports that nothing differs.

    Args:
        entries: Pending (non-NONE) entries.
    """
    counts = {action: 0 for action in (DiffAction.ADD, DiffAction.UPDATE, DiffAction.REMOVE)}
    for entry in entries:
        if entry.action in counts:
            counts[entry.action] += 1

    parts: list[str] = []
    if counts[DiffAction.ADD]:
        parts.append(f"[added]{counts[DiffAction.ADD]} to add[/added]")
    if counts[DiffAction.UPDATE]:
        parts.append(f"[changed]{counts[DiffAction.UPDATE]} to update[/changed]")
    if counts[DiffAction.REMOVE]:
        parts.append(f"[removed]{counts[DiffAction.REMOVE]} to remove[/removed]")

    if parts:
        summary = ", ".join(parts)
        console.print(f"\nSummary: {summary} ({len(entries)} total changes)")
    else:
        console.print("\n[muted]No differences found.[/muted]")


def print_results_summary(report: ApplyReport) -> None:
    """Print a summary of an apply run.

    Args:
        report: Report returned by the orchestrator.
    """
    if report.restarted:
        console.print(f"[muted]Restarted: {', '.join(report.restarted)}[/muted]")

    if not report.has_failures:
        print_success(f"All {report.success_count} change(s) applied successfully.")
    else:
        console.print(
            f"\n[success]{report.success_count} succeeded[/success], "
            f"[error]{report.failure_count} failed[/error]"
        )
