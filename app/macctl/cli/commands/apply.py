"""Apply command implementation.

Brings the machine in line with the config: installs missing packages
and apps, writes preferences, reconciles the Dock, sets the wallpaper,
configures git and links dotfiles.
"""

from typing import Annotated

import typer

from macctl.cli.display import (
    create_diff_table,
    create_results_table,
    format_result_line,
    print_changes_summary,
    print_results_summary,
)
from macctl.cli.types import AllowScriptOption, ConfigOption, StrictOption, build_plan
from macctl.core.orchestrator import ApplyOrchestrator
from macctl.core.record import RecordError, RecordStore
from macctl.models.result import ApplyResult
from macctl.operators import get_operators
from macctl.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Apply the config to this machine.",
    invoke_without_command=True,
)


def _confirm_changes(change_count: int) -> bool:
    """Prompt user to confirm applying changes.

    Args:
        change_count: Number of changes to be applied.

    Returns:
        True if user confirms, False otherwise.
    """
    return typer.confirm(
        f"\nApply {change_count} change(s)?",
        default=False,
    )


def _show_progress(result: ApplyResult) -> None:
    console.print(format_result_line(result))


@app.callback(invoke_without_command=True)
def apply_config(
    ctx: typer.Context,
    config: ConfigOption = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be done without making changes.",
        ),
    ] = False,
    strict: StrictOption = False,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt and proceed.",
        ),
    ] = False,
    allow_script: AllowScriptOption = False,
) -> None:
    """Apply the config to this machine.

    Changes are applied in a fixed order: formulae, casks, App Store apps,
    preferences (followed by restarting affected processes), Dock apps,
    wallpaper, git config, dotfiles. A failing step does not stop the
    remaining ones; the command exits non-zero if any step failed.

    Preference keys removed from the config since the last apply are
    deleted. With --strict, installed formulae, casks and App Store apps
    that are not in the config are removed as well.

    Examples:
        macctl apply --dry-run          # Preview changes
        macctl apply --yes              # Apply without confirmation
        macctl apply --strict           # Also remove undeclared packages
        macctl apply -c ~/dotfiles/macctl.toml
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    quiet = bool(ctx.obj and ctx.obj.get("quiet"))
    record_store = RecordStore()
    plan = build_plan(config, strict=strict, allow_script=allow_script, record_store=record_store)

    pending = [*plan.diff.changes(), *plan.dock_changes]

    if not pending:
        print_success("Machine is already in sync with config. Nothing to do.")
    else:
        title = "Planned Changes (Dry Run)" if dry_run else "Planned Changes"
        console.print(create_diff_table(pending, title=title))
        print_changes_summary(pending)

    if dry_run:
        print_info("\nDry-run mode: No changes were made.")
        return

    if pending and not yes and not _confirm_changes(len(pending)):
        print_info("Aborted.")
        raise typer.Exit(code=0)

    report = None
    if pending:
        console.print("\n[bold]Applying changes...[/bold]\n")
        orchestrator = ApplyOrchestrator(
            get_operators(plan.config_path, allow_script=allow_script),
            on_result=None if quiet else _show_progress,
        )
        report = orchestrator.apply(
            plan.diff,
            desired_dock=plan.config.macos.dock_apps,
            observed_dock=plan.observed.dock_apps,
        )

    # The record reflects what is desired now, even after partial failure
    try:
        record_store.save(plan.config.setting_identities())
    except RecordError as e:
        print_warning(f"Could not update record: {e}")

    if report is None:
        return

    print_results_summary(report)

    if report.has_failures:
        console.print(create_results_table(report.failures()))
        print_error("Some changes could not be applied.")
        raise typer.Exit(code=1)
