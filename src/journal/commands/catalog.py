"""Command: journal catalog - Print the permission catalog."""

import typer
from rich.console import Console
from rich.table import Table

from journal.core.permissions.catalog import catalog_entries


console = Console()


def show_catalog(
    system_only: bool = typer.Option(
        False, "--system", "-s", help="Show only system permissions"
    ),
) -> None:
    """Print every grantable permission and what it implies."""
    entries = catalog_entries()
    if system_only:
        entries = [e for e in entries if e.category == "System"]

    table = Table(title="Permission Catalog", show_header=True)
    table.add_column("Permission", style="cyan", no_wrap=True)
    table.add_column("Category")
    table.add_column("Description")
    table.add_column("Implies", style="green")

    for entry in entries:
        implies = ", ".join(entry.implies)
        if len(entry.implies) > 4:
            implies = f"{len(entry.implies)} permissions"
        table.add_row(entry.permission, entry.category, entry.label, implies)

    console.print()
    console.print(table)
    console.print()
