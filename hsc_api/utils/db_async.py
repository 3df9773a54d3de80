"""Async SQLAlchemy engine and session helpers.

One pooled engine per process; every request borrows a session from it via
``get_session`` and scopes its writes with ``async with db.begin()``.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from hsc_api.config import settings
from hsc_api.utils.db_url import prepare_connection

DATABASE_URL, CONNECT_ARGS = prepare_connection(settings.database_url)

engine = create_async_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    connect_args=CONNECT_ARGS,
)
SessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session."""
    async with SessionLocal() as session:
        yield session


async def dispose_engine() -> None:
    """Dispose of the async engine and its connection pool."""
    await engine.dispose()
