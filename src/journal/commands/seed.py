"""Command: journal seed - Create tables, default roles and the first admin."""

import asyncio
import secrets

import structlog
import typer
from rich.console import Console
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from journal.commands._db import run_in_session
from journal.config import settings
from journal.core.auth.backend import hash_password
from journal.core.database import Base, create_engine_from_url
from journal.core.permissions.catalog import DEFAULT_ROLES
from journal.core.permissions.models import Role
from journal.modules.roles.repos import RoleRepository
from journal.modules.users.models import User


console = Console()
logger = structlog.get_logger()


async def create_tables() -> None:
    """Create any missing tables."""
    engine = create_engine_from_url(settings.async_database_url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await engine.dispose()


async def seed_roles(session: AsyncSession) -> tuple[list[Role], list[Role]]:
    """Create the default roles that are missing.

    Defaults are matched by ``key``, never by display name, and roles
    that already exist are left as they are: renames, edited
    permissions and the system flag all survive a re-seed. The
    protected default counts as present while any system role exists.

    Returns:
        Tuple of (created roles, existing roles)
    """
    created: list[Role] = []
    existing: list[Role] = []

    result = await session.execute(select(Role))
    roles = list(result.scalars())
    by_key = {role.key: role for role in roles if role.key is not None}
    names = {role.name for role in roles}
    system_role = next((role for role in roles if role.is_system), None)

    for definition in DEFAULT_ROLES:
        role = by_key.get(definition.key)
        if role is None and definition.is_system:
            role = system_role
        if role is not None:
            existing.append(role)
            continue

        if definition.name in names:
            logger.warning("default_role_name_taken", key=definition.key, name=definition.name)
            continue

        role = Role(
            key=definition.key,
            name=definition.name,
            description=definition.description,
            rank=definition.rank,
            is_system=definition.is_system,
            permissions=list(definition.permissions),
        )
        session.add(role)
        names.add(role.name)
        created.append(role)

    await session.flush()
    logger.info(
        "roles_seeded",
        created=[r.name for r in created],
        existing=[r.name for r in existing],
    )
    return created, existing


async def seed_super_admin(
    session: AsyncSession,
    email: str,
    full_name: str,
    password: str,
) -> User | None:
    """Create the first system administrator unless one already exists.

    Returns:
        The created user, or None if a system administrator exists
    """
    existing = await session.execute(
        select(User).join(Role, User.role_id == Role.id).where(Role.is_system.is_(True)).limit(1)
    )
    if existing.scalar_one_or_none() is not None:
        return None

    system_role = await RoleRepository(session).get_system_role()
    if system_role is None:
        raise RuntimeError("No system role to assign; seed the default roles first")

    user = User(
        email=email,
        full_name=full_name,
        password_hash=hash_password(password),
        role_id=system_role.id,
        extra_permissions=[],
    )
    session.add(user)
    await session.flush()
    logger.info("super_admin_created", user_id=str(user.id), email=email)
    return user


async def _seed(email: str, full_name: str, password: str) -> tuple[int, int, User | None]:
    await create_tables()

    async def work(session: AsyncSession) -> tuple[int, int, User | None]:
        created, existing = await seed_roles(session)
        admin = await seed_super_admin(session, email, full_name, password)
        return len(created), len(existing), admin

    return await run_in_session(work)


def seed(
    admin_email: str = typer.Option(
        None, "--admin-email", help="Email of the first administrator"
    ),
    admin_password: str = typer.Option(
        None,
        "--admin-password",
        envvar="SUPER_ADMIN_PASSWORD",
        help="Password of the first administrator (generated if omitted)",
    ),
) -> None:
    """Create tables, the missing default roles and the first administrator.

    Safe to run repeatedly: existing roles are never modified and no
    administrator is created once one exists.
    """
    email = admin_email or settings.super_admin_email
    password = admin_password or secrets.token_urlsafe(16)

    created, existing, admin = asyncio.run(
        _seed(email, settings.super_admin_name, password)
    )

    console.print(f"[green]✓[/green] Roles: {created} created, {existing} already present")
    if admin is None:
        console.print("[dim]A system administrator already exists; none created.[/dim]")
        return

    console.print(f"[green]✓[/green] Created administrator [cyan]{email}[/cyan]")
    if not admin_password:
        console.print(f"  Generated password: [bold]{password}[/bold]")
