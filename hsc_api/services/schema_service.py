"""Schema bootstrap and readiness reporting.

``bootstrap_schema`` runs once at startup and returns a ``SchemaStatus``; the
app keeps it on ``app.state.schema_status`` and ``require_db_ready`` consults
it per request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import HTTPException, Request
from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlmodel import SQLModel

from hsc_api.schemas.base import utcnow
from hsc_api.schemas.schema_meta import SCHEMA_VERSION, SchemaMeta

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaStatus:
    ready: bool
    version: int | None = None
    error: str | None = None


NOT_BOOTSTRAPPED = SchemaStatus(ready=False, error="not_bootstrapped")


def _import_tables() -> None:
    # Ensure models are imported so metadata is fully populated
    from hsc_api.schemas import auth, news, schema_meta, seasons  # noqa: F401


async def init_db(engine: AsyncEngine) -> None:
    """Create missing tables and record the schema version."""
    _import_tables()

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
        existing = await conn.execute(select(SchemaMeta.id).limit(1))  # type: ignore[call-overload]
        if existing.first() is None:
            await conn.execute(
                SchemaMeta.__table__.insert().values(  # type: ignore[attr-defined]
                    version=SCHEMA_VERSION, updated_at=utcnow()
                )
            )


async def read_schema_version(engine: AsyncEngine) -> int | None:
    async with engine.connect() as conn:
        result = await conn.execute(select(SchemaMeta.version).limit(1))  # type: ignore[call-overload]
        return result.scalar_one_or_none()


async def bootstrap_schema(engine: AsyncEngine, *, create_tables: bool) -> SchemaStatus:
    """Prepare (or just check) the schema and report whether it is usable.

    Failures are logged and reported in the returned status instead of
    raised, so the API can still answer /health with the reason.
    """
    try:
        if create_tables:
            logger.info("Ensuring database schema…")
            await init_db(engine)
        version = await read_schema_version(engine)
    except Exception as exc:
        logger.exception("Schema bootstrap failed")
        return SchemaStatus(ready=False, error=str(exc) or exc.__class__.__name__)

    if version is None:
        logger.error("schema_meta has no version row; run migrations")
        return SchemaStatus(ready=False, error="schema_version_missing")

    logger.info(f"Database schema ready (v{version}).")
    return SchemaStatus(ready=True, version=version)


def get_schema_status(request: Request) -> SchemaStatus:
    return getattr(request.app.state, "schema_status", NOT_BOOTSTRAPPED)


async def require_db_ready(request: Request) -> None:
    """FastAPI dependency rejecting requests until the schema is ready (503)."""
    if not get_schema_status(request).ready:
        raise HTTPException(status_code=503, detail="db_not_ready")


async def describe_schema(db: AsyncSession) -> tuple[int | None, list[str]]:
    """Return the recorded schema version and the tables present."""
    async with db.begin():
        version = (
            await db.execute(select(SchemaMeta.version).limit(1))  # type: ignore[call-overload]
        ).scalar_one_or_none()
        conn = await db.connection()
        tables = await conn.run_sync(
            lambda sync_conn: sorted(inspect(sync_conn).get_table_names())
        )
    return version, tables
