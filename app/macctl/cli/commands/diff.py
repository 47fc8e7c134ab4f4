"""Diff command implementation.

Compares the config with the current state of the machine.
"""

import json
from typing import Annotated

import typer

from macctl.cli.display import create_diff_table, print_changes_summary
from macctl.cli.types import AllowScriptOption, ConfigOption, StrictOption, build_plan
from macctl.models.diff import DiffAction
from macctl.utils.formatting import console, print_success

app = typer.Typer(
    help="Compare the config with the current machine state.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def diff_config(
    ctx: typer.Context,
    config: ConfigOption = None,
    strict: StrictOption = False,
    brief: Annotated[
        bool,
        typer.Option(
            "--brief",
            "-b",
            help="Show summary counts only.",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON for scripting.",
        ),
    ] = False,
    allow_script: AllowScriptOption = False,
) -> None:
    """Compare the config with the current machine state.

    Status markers:
      [+] ADD: Declared but not present
      [~] UPDATE: Present but different (dotfiles are always regenerated)
      [-] REMOVE: Present but no longer declared

    Examples:
        macctl diff                    # Show all differences
        macctl diff --brief            # Summary counts only
        macctl diff --strict           # Include undeclared packages
        macctl diff --json             # JSON output for scripting
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    plan = build_plan(config, strict=strict, allow_script=allow_script)
    pending = [*plan.diff.changes(), *plan.dock_changes]

    if json_output:
        data = plan.diff.to_dict()
        data["dock"] = [
            {"action": entry.action.value, "name": entry.name, "position": entry.position}
            for entry in plan.dock_changes
        ]
        data["in_sync"] = not plan.has_changes
        console.print_json(json.dumps(data, default=str))
        return

    if not plan.has_changes:
        print_success(f"Machine is in sync with config ({plan.config.item_count} items checked).")
        return

    if brief:
        added = sum(1 for entry in pending if entry.action == DiffAction.ADD)
        updated = sum(1 for entry in pending if entry.action == DiffAction.UPDATE)
        removed = sum(1 for entry in pending if entry.action == DiffAction.REMOVE)
        console.print(f"[added]Add:[/added] {added}")
        console.print(f"[changed]Update:[/changed] {updated}")
        console.print(f"[removed]Remove:[/removed] {removed}")
        console.print(f"[muted]Total changes: {len(pending)}[/muted]")
        return

    console.print(create_diff_table(pending))
    print_changes_summary(pending)
