"""Command: journal check - Evaluate a permission for a stored user."""

import asyncio
from uuid import UUID

import typer
from rich.console import Console
from sqlalchemy.ext.asyncio import AsyncSession

from journal.commands._db import run_in_session
from journal.core.permissions.checker import PermissionChecker
from journal.core.permissions.directory import SQLPermissionDirectory
from journal.core.permissions.schemas import PermissionCheckResult, PermissionContext
from journal.modules.users.repos import UserRepository


console = Console()


async def _check(
    email: str, permission: str, resource_id: UUID | None
) -> PermissionCheckResult | None:
    async def work(session: AsyncSession) -> PermissionCheckResult | None:
        user = await UserRepository(session).get_by_email(email)
        if user is None:
            return None
        context = None
        if resource_id is not None:
            context = PermissionContext(resource_id=resource_id, actor_id=user.id)
        checker = PermissionChecker(SQLPermissionDirectory(session))
        return await checker.check(user, permission, context)

    return await run_in_session(work)


def check(
    email: str = typer.Argument(..., help="Email of the user to check"),
    permission: str = typer.Argument(..., help="Permission token, e.g. article.CREATE"),
    resource_id: str = typer.Option(
        None, "--resource-id", "-r", help="Id of the user being acted on"
    ),
) -> None:
    """Check whether a user holds a permission.

    Exits with status 1 when the permission is denied.
    """
    target: UUID | None = None
    if resource_id:
        try:
            target = UUID(resource_id)
        except ValueError:
            console.print(f"[red]Error:[/red] '{resource_id}' is not a valid id")
            raise typer.Exit(2) from None

    result = asyncio.run(_check(email, permission, target))

    if result is None:
        console.print(f"[red]Error:[/red] No user with email '{email}'")
        raise typer.Exit(2)

    if result.allowed:
        console.print(f"[green]allowed[/green] {permission}")
        return

    console.print(f"[red]denied[/red] {permission}: {result.reason}")
    raise typer.Exit(1)
