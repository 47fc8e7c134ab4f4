"""Search command implementation.

Looks up Mac App Store apps so their ids can be added to the config.
"""

from typing import Annotated

import typer
from rich.table import Table

from macctl.collectors.appstore import search_app_store
from macctl.collectors.base import CollectionError
from macctl.utils.formatting import console, print_error, print_info, print_warning


def search(
    query: Annotated[str, typer.Argument(help="App name to search for.")],
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-l",
            min=1,
            help="Maximum number of results to show.",
        ),
    ] = 10,
) -> None:
    """Search the Mac App Store.

    Prints matching apps with ready-to-paste config entries.

    Examples:
        macctl search xcode
        macctl search "things 3" --limit 3
    """
    try:
        listings = search_app_store(query)
    except CollectionError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not listings:
        print_warning(f"No App Store apps found for '{query}'.")
        return

    table = Table(
        title=f"App Store results for '{query}'",
        show_header=True,
        header_style="header",
        border_style="border",
    )
    table.add_column("ID", style="identity", justify="right")
    table.add_column("Name", no_wrap=True)
    table.add_column("Version", style="muted")
    table.add_column("Config entry", style="muted")

    for listing in listings[:limit]:
        escaped = listing.name.replace("\\", "\\\\").replace('"', '\\"')
        table.add_row(
            str(listing.id),
            listing.name,
            listing.version or "-",
            f'{{ id = {listing.id}, name = "{escaped}" }}',
        )

    console.print(table)
    print_info("Add entries to the appstore.apps list in your config.")
