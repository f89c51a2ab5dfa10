"""Database access for CLI commands.

Each command run gets its own engine so it works from a plain
``asyncio.run`` without touching the application's module-level pool.
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from journal.config import settings
from journal.core.database import create_engine_from_url, create_session_factory


T = TypeVar("T")


async def run_in_session(work: Callable[[AsyncSession], Awaitable[T]]) -> T:
    """Run ``work`` in a session that commits on success."""
    engine = create_engine_from_url(settings.async_database_url)
    try:
        async with create_session_factory(engine)() as session:
            try:
                result = await work(session)
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            return result
    finally:
        await engine.dispose()
