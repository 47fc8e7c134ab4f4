"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from macctl import __version__
from macctl.cli.commands import apply, diff, init, search
from macctl.utils.formatting import configure_logging

# Create main Typer app
app = typer.Typer(
    name="macctl",
    help="Declarative workstation configuration for macOS.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"macctl version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """macctl - Declarative workstation configuration for macOS.

    Describe packages, apps, preferences, Dock, wallpaper, git config and
    dotfiles in one config file, then diff and apply it.
    """
    configure_logging(verbose)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands
app.add_typer(init.app, name="init")
app.add_typer(diff.app, name="diff")
app.add_typer(apply.app, name="apply")
app.command(name="search")(search.search)


if __name__ == "__main__":
    app()
