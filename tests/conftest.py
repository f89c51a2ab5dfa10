"""Pytest configuration and shared fixtures."""

import os


# Must be set before journal.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402

from journal.commands.seed import seed_roles  # noqa: E402
from journal.core.auth.backend import create_access_token  # noqa: E402
from journal.core.database import Base, create_engine_from_url, get_db  # noqa: E402
from journal.core.permissions.models import Role  # noqa: E402
from journal.main import create_app  # noqa: E402
from journal.modules.users.models import User  # noqa: E402
from tests.factories.user import UserFactory  # noqa: E402


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    """Create a fresh in-memory database per test."""
    engine = create_engine_from_url(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db(engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a transactional database session for tests.

    Each test runs in its own transaction that is rolled back
    after the test completes.
    """
    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with engine.connect() as conn:
        await conn.begin()

        async with session_factory(bind=conn) as session:
            yield session

        await conn.rollback()


@pytest.fixture
async def app(db: AsyncSession):
    """Create test application instance."""
    application = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    application.dependency_overrides[get_db] = override_get_db

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


# ============================================================
# Role and User Fixtures
# ============================================================


@pytest.fixture
async def roles(db: AsyncSession) -> dict[str, Role]:
    """Seed the default roles.

    Returns:
        Roles keyed by name
    """
    created, _ = await seed_roles(db)
    return {role.name: role for role in created}


@pytest.fixture
def make_user(db: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Factory fixture persisting a user with the given role."""

    async def _make_user(role: Role, **kwargs: Any) -> User:
        user = UserFactory.build(role_id=role.id, **kwargs)
        db.add(user)
        await db.flush()
        await db.refresh(user)
        return user

    return _make_user


@pytest.fixture
async def super_admin(roles: dict[str, Role], make_user) -> User:
    return await make_user(roles["Super Admin"], email="super@example.com")


@pytest.fixture
async def admin(roles: dict[str, Role], make_user) -> User:
    return await make_user(roles["Admin"], email="admin@example.com")


@pytest.fixture
async def editor(roles: dict[str, Role], make_user) -> User:
    return await make_user(roles["Editor"], email="editor@example.com")


@pytest.fixture
async def viewer(roles: dict[str, Role], make_user) -> User:
    return await make_user(roles["Viewer"], email="viewer@example.com")


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Build authorization headers carrying a valid access token for a user."""

    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers
