"""Direct SQL helpers for arranging and inspecting season rows."""

from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

BASE_START = datetime(2025, 1, 1)


async def insert_season(
    db_session: AsyncSession,
    *,
    slug: str,
    status: str = "draft",
    start_at: datetime | None = None,
    updated_at: datetime | None = None,
) -> int:
    """Insert a season in any status, bypassing the service layer."""
    start = start_at or BASE_START
    stamp = updated_at or datetime(2025, 1, 1)
    async with db_session.begin():
        result = await db_session.execute(
            text(
                """
                INSERT INTO seasons (
                    slug, name, description, start_at, end_at,
                    status, created_at, updated_at
                )
                VALUES (
                    :slug, :name, NULL, :start_at, :end_at,
                    CAST(:status AS season_status), :stamp, :stamp
                )
                RETURNING id
                """
            ),
            {
                "slug": slug,
                "name": slug.replace("-", " ").title(),
                "start_at": start,
                "end_at": start + timedelta(days=90),
                "status": status,
                "stamp": stamp,
            },
        )
        season_id = result.scalar_one()
    return int(season_id)


async def season_statuses(db_session: AsyncSession) -> dict[str, str]:
    """Map slug -> status for every season."""
    async with db_session.begin():
        result = await db_session.execute(
            text("SELECT slug, status::text FROM seasons ORDER BY id")
        )
        return {slug: status for slug, status in result.all()}


async def season_row(db_session: AsyncSession, slug: str) -> dict:
    async with db_session.begin():
        result = await db_session.execute(
            text(
                "SELECT id, slug, name, description, start_at, end_at,"
                " status::text AS status, created_at, updated_at"
                " FROM seasons WHERE slug = :slug"
            ),
            {"slug": slug},
        )
        row = result.mappings().one()
    return dict(row)
