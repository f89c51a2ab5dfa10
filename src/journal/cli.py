"""Journal administration CLI."""

import typer
from rich.console import Console

from journal import __version__
from journal.commands import catalog, check, roles, seed, token_cmd
from journal.core.logging import configure_logging


console = Console()

app = typer.Typer(
    name="journal",
    help="Inspect permissions and manage the journal's users and roles.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register commands
app.command(name="catalog")(catalog.show_catalog)
app.command(name="roles")(roles.show_roles)
app.command(name="seed")(seed.seed)
app.command(name="check")(check.check)
app.command(name="token")(token_cmd.token)


@app.callback(invoke_without_command=True)
def version_callback(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit."
    ),
) -> None:
    """Journal CLI - Inspect permissions and manage users and roles."""
    if version:
        console.print(f"[bold cyan]journal[/bold cyan] version {__version__}")
        raise typer.Exit()


def main() -> None:
    """Entry point for the CLI."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
