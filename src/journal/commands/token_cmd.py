"""Command: journal token - Issue an access token for development."""

import asyncio

import typer
from rich.console import Console
from sqlalchemy.ext.asyncio import AsyncSession

from journal.commands._db import run_in_session
from journal.core.auth.backend import create_access_token
from journal.modules.users.repos import UserRepository


console = Console()


async def _token_for(email: str) -> str | None:
    async def work(session: AsyncSession) -> str | None:
        user = await UserRepository(session).get_by_email(email)
        if user is None or not user.is_active:
            return None
        return create_access_token(user.id)

    return await run_in_session(work)


def token(email: str = typer.Argument(..., help="Email of an active user")) -> None:
    """Print a bearer access token for a user."""
    access_token = asyncio.run(_token_for(email))
    if access_token is None:
        console.print(f"[red]Error:[/red] No active user with email '{email}'")
        raise typer.Exit(2)
    typer.echo(access_token)
