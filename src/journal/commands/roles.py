"""Command: journal roles - Print the built-in role definitions."""

from rich.console import Console
from rich.table import Table

from journal.core.permissions.catalog import DEFAULT_ROLES


console = Console()


def show_roles() -> None:
    """Print the roles created by ``journal seed``."""
    table = Table(title="Default Roles", show_header=True)
    table.add_column("Role", style="cyan", no_wrap=True)
    table.add_column("Rank", justify="right")
    table.add_column("System", no_wrap=True)
    table.add_column("Permissions")

    for role in DEFAULT_ROLES:
        table.add_row(
            role.name,
            str(role.rank),
            "[green]yes[/green]" if role.is_system else "",
            ", ".join(role.permissions),
        )

    console.print()
    console.print(table)
    console.print()
