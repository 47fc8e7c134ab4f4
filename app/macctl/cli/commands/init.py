"""Init command implementation.

Creates a config.toml from what is currently installed on this machine.
"""

from pathlib import Path
from typing import Annotated, Any

import typer

from macctl.collectors.appstore import AppStoreCollector
from macctl.collectors.base import CollectionError, Collector
from macctl.collectors.brew import BrewCollector
from macctl.core.config import ConfigError, config_exists, save_config
from macctl.core.paths import get_config_path
from macctl.core.record import PersistedRecord
from macctl.models.config import DesiredConfig
from macctl.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Initialize a config from the current machine.",
    invoke_without_command=True,
)


def _collect(collector: Collector) -> dict[Any, str]:
    """Run a collector, returning nothing if it is unavailable or fails."""
    if not collector.is_available():
        return {}
    try:
        return collector.collect(DesiredConfig(), PersistedRecord())
    except CollectionError as e:
        print_warning(str(e))
        return {}


def build_starter_config(
    formulae: dict[str, str],
    casks: dict[str, str],
    apps: dict[int, str],
) -> dict[str, Any]:
    """Build a config document from installed software.

    Args:
        formulae: Installed formula name -> version.
        casks: Installed cask name -> version.
        apps: Installed App Store id -> name.

    Returns:
        Config document ready for TOML serialization.
    """
    data: dict[str, Any] = {
        "brew": {
            "packages": sorted(formulae),
            "casks": sorted(casks),
        },
    }
    if apps:
        data["appstore"] = {
            "apps": [
                {"id": app_id, "name": name}
                for app_id, name in sorted(apps.items(), key=lambda item: item[1].lower())
            ]
        }
    return data


@app.callback(invoke_without_command=True)
def init_config(
    ctx: typer.Context,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path for the config file.",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing config without prompting.",
        ),
    ] = False,
) -> None:
    """Initialize a config from the current machine.

    Lists installed Homebrew formulae and casks and Mac App Store apps
    and writes them to a new config.toml. Preferences, Dock, wallpaper,
    git and dotfiles are left for you to add.

    Examples:
        macctl init                    # Create config in default location
        macctl init --output my.toml   # Create config at custom path
        macctl init --force            # Overwrite existing config
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    output_path = output or get_config_path()

    if config_exists(output_path):
        if not force:
            print_error(f"Config already exists: {output_path}")
            print_info("Use --force to overwrite or specify a different path with --output.")
            raise typer.Exit(code=1)
        print_warning(f"Overwriting existing config: {output_path}")

    brew = BrewCollector()
    if not brew.is_available():
        print_warning("Homebrew is not installed; the config will have no packages.")

    print_info("Reading installed software...")
    formulae = _collect(brew)
    casks = _collect(BrewCollector(cask=True))
    apps = _collect(AppStoreCollector())

    data = build_starter_config(formulae, casks, apps)

    console.print()
    console.print("[bold]Config Summary[/bold]")
    console.print(f"  Formulae: [identity]{len(formulae)}[/identity]")
    console.print(f"  Casks: [identity]{len(casks)}[/identity]")
    console.print(f"  App Store apps: [identity]{len(apps)}[/identity]")
    console.print()

    try:
        saved_path = save_config(data, output_path)
    except ConfigError as e:
        print_error(f"Failed to save config: {e}")
        raise typer.Exit(code=1) from e

    print_success(f"Config created: {saved_path}")
