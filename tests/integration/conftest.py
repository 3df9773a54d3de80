"""Pytest fixtures aligned with the live Postgres stack.

Services open their own transactions (``async with db.begin():``), so tests
get plain sessions rather than an outer wrapping transaction. Each test
starts from empty tables instead.
"""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio

from httpx import AsyncClient, ASGITransport
from pydantic import ValidationError
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel
from dotenv import load_dotenv

load_dotenv()

TABLES = ("sessions", "users", "news", "seasons", "schema_meta")


def _load_database_url() -> str:
    """Resolve the database URL for tests, enforcing an explicit opt-in."""
    test_db_url = os.getenv("TEST_DATABASE_URL")
    pytest_allow_db = int(os.getenv("PYTEST_ALLOW_DB", "0"))
    if not test_db_url:
        pytest.skip("No TEST_DATABASE_URL is configured for tests.")
    if pytest_allow_db != 1:
        raise RuntimeError(
            "Running integration tests requires setting PYTEST_ALLOW_DB=1 to"
            " confirm the configured database is safe to mutate."
        )
    # mypy: test_db_url is str after the guard above
    return test_db_url  # type: ignore[return-value]


@pytest.fixture(scope="session")
def database_url() -> str:
    """Return the Postgres URL the test suite should target."""
    return _load_database_url()


@pytest_asyncio.fixture()
async def async_engine(database_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Yield an engine over freshly emptied tables (schema_meta seeded)."""
    from hsc_api.services.schema_service import init_db
    from hsc_api.utils.db_url import prepare_connection

    url, connect_args = prepare_connection(database_url)
    engine = create_async_engine(url, pool_pre_ping=True, connect_args=connect_args)

    async with engine.begin() as conn:
        from hsc_api.schemas import auth, news, schema_meta, seasons  # noqa: F401

        await conn.run_sync(SQLModel.metadata.create_all)
        await conn.execute(
            text(f"TRUNCATE {', '.join(TABLES)} RESTART IDENTITY CASCADE")
        )
    await init_db(engine)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture()
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture()
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session for direct service calls and assertions."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def app_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Provide an HTTP client with the application wired to the test database.

    Each request gets its own session, as in production. The lifespan does not
    run under ASGITransport, so the schema is marked ready here.
    """
    try:
        from hsc_api.main import app
    except ValidationError as exc:  # pragma: no cover - guard for misconfigured env
        pytest.skip(f"App configuration failed: {exc}")

    from hsc_api.services.schema_service import SchemaStatus
    from hsc_api.utils.db_async import get_session

    async def _get_session_override() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    previous_status = app.state.schema_status
    app.state.schema_status = SchemaStatus(ready=True, version=1)
    app.dependency_overrides[get_session] = _get_session_override
    transport = ASGITransport(app=app)
    try:
        # https so the Secure session cookie is sent back
        async with AsyncClient(transport=transport, base_url="https://test") as client:
            yield client
    finally:
        app.dependency_overrides.pop(get_session, None)
        app.state.schema_status = previous_status
