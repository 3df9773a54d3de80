"""Season lifecycle management.

Seasons move ``draft -> active -> closed``. Activation is the only transition
with cross-request ordering: it runs in a single transaction that takes an
advisory lock, row-locks the target and every currently active season,
demotes the active ones back to ``draft`` and promotes the target. Every
other operation is a single statement.

No season state is cached here; each call re-reads the rows it needs inside
its own transaction.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import select, text, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hsc_api.schemas.base import utcnow
from hsc_api.schemas.seasons import Season, SeasonStatus
from hsc_api.services.errors import InvalidFieldError, SlugAlreadyExistsError
from hsc_api.utils.slug import normalize_slug

logger = logging.getLogger(__name__)

# Transaction-scoped lock serializing activations even when no row is active yet
ACTIVATION_LOCK_SQL = text("SELECT pg_advisory_xact_lock(hashtext('seasons.activate'))")


class ActivationError(str, Enum):
    """Reasons an activation request can fail."""

    SEASON_NOT_FOUND = "season_not_found"
    SEASON_CLOSED = "season_closed"
    TX_FAILED = "tx_failed"


@dataclass(frozen=True)
class ActivationResult:
    """Outcome of ``activate_season``.

    ``detail`` is only set for ``TX_FAILED`` and carries the underlying error
    message for diagnostics; it is not meant for end users.
    """

    ok: bool
    error: ActivationError | None = None
    detail: str | None = None


class _ActivationAborted(Exception):
    """Raised inside the activation transaction to force a rollback."""

    def __init__(self, error: ActivationError):
        super().__init__(error.value)
        self.error = error


async def list_seasons(db: AsyncSession) -> list[Season]:
    """Return every season, newest start first (ties: newest row first)."""
    async with db.begin():
        result = await db.execute(
            select(Season).order_by(
                Season.start_at.desc(),  # type: ignore[attr-defined]
                Season.id.desc(),  # type: ignore[union-attr]
            )
        )
        return list(result.scalars().all())


async def get_season_by_slug(db: AsyncSession, slug: str) -> Season | None:
    async with db.begin():
        result = await db.execute(
            select(Season).where(Season.slug == slug).limit(1)  # type: ignore[arg-type]
        )
        return result.scalar_one_or_none()


async def get_active_season(db: AsyncSession) -> Season | None:
    async with db.begin():
        result = await db.execute(
            select(Season)
            .where(Season.status == SeasonStatus.ACTIVE)  # type: ignore[arg-type]
            .limit(1)
        )
        return result.scalar_one_or_none()


async def create_season(
    db: AsyncSession,
    *,
    slug: str,
    name: str,
    start_at: datetime,
    end_at: datetime,
    description: str | None = None,
) -> int:
    """Insert a new season and return its id.

    The status is always ``draft``; activation is a separate step.

    Raises:
        InvalidFieldError: ``invalid_slug`` when the slug normalizes to nothing.
        SlugAlreadyExistsError: another season already uses the slug.
    """
    clean_slug = normalize_slug(slug)
    if not clean_slug:
        raise InvalidFieldError("invalid_slug")

    now = utcnow()
    season = Season(
        slug=clean_slug,
        name=name,
        description=description,
        start_at=start_at,
        end_at=end_at,
        status=SeasonStatus.DRAFT,
        created_at=now,
        updated_at=now,
    )
    try:
        async with db.begin():
            db.add(season)
            await db.flush()
    except IntegrityError as exc:
        raise SlugAlreadyExistsError() from exc

    assert season.id is not None
    return season.id


def build_season_patch(patch: Mapping[str, Any]) -> dict[str, Any]:
    """Select the column updates a patch request asks for.

    ``name``, ``start_at`` and ``end_at`` are applied only when given a
    non-null value. ``description`` is applied whenever the key is present,
    so an explicit ``None`` clears it.
    """
    values: dict[str, Any] = {}
    if patch.get("name") is not None:
        values["name"] = patch["name"]
    if "description" in patch:
        values["description"] = patch["description"]
    if patch.get("start_at") is not None:
        values["start_at"] = patch["start_at"]
    if patch.get("end_at") is not None:
        values["end_at"] = patch["end_at"]
    return values


async def patch_season(db: AsyncSession, slug: str, patch: Mapping[str, Any]) -> int:
    """Apply a partial update and return the number of rows affected.

    A patch with no recognised fields touches nothing (not even
    ``updated_at``) and returns 0.
    """
    values = build_season_patch(patch)
    if not values:
        return 0

    values["updated_at"] = utcnow()
    async with db.begin():
        result = await db.execute(
            update(Season)
            .where(Season.slug == slug)  # type: ignore[arg-type]
            .values(**values)
        )
    return result.rowcount or 0  # type: ignore[attr-defined]


async def close_season(db: AsyncSession, slug: str) -> int:
    """Mark a season ``closed`` whatever its current status.

    Re-closing is allowed and still counts as an affected row.
    """
    async with db.begin():
        result = await db.execute(
            update(Season)
            .where(Season.slug == slug)  # type: ignore[arg-type]
            .values(status=SeasonStatus.CLOSED, updated_at=utcnow())
        )
    return result.rowcount or 0  # type: ignore[attr-defined]


async def activate_season(db: AsyncSession, slug: str) -> ActivationResult:
    """Make ``slug`` the only active season.

    Takes a transaction-scoped advisory lock, then locks the target row and
    every active row, so concurrent activations serialize on the database
    rather than in the application. A waiting activation sees the committed
    result of the one ahead of it. Previously active seasons go back to
    ``draft``; they are never closed here.
    Re-activating the active season succeeds without changing anything else.
    """
    try:
        async with db.begin():
            # Taken before any row lock so waiters hold nothing another activation needs
            await db.execute(ACTIVATION_LOCK_SQL)
            target = (
                await db.execute(
                    select(Season.id, Season.status)  # type: ignore[call-overload]
                    .where(Season.slug == slug)
                    .with_for_update()
                )
            ).one_or_none()
            if target is None:
                raise _ActivationAborted(ActivationError.SEASON_NOT_FOUND)
            if target.status == SeasonStatus.CLOSED:
                raise _ActivationAborted(ActivationError.SEASON_CLOSED)

            # Covers accidental duplicates as well as the usual single row
            await db.execute(
                select(Season.id)  # type: ignore[call-overload]
                .where(Season.status == SeasonStatus.ACTIVE)
                .with_for_update()
            )

            now = utcnow()
            await db.execute(
                update(Season)
                .where(
                    Season.status == SeasonStatus.ACTIVE,  # type: ignore[arg-type]
                    Season.slug != slug,  # type: ignore[arg-type]
                )
                .values(status=SeasonStatus.DRAFT, updated_at=now)
            )
            await db.execute(
                update(Season)
                .where(Season.slug == slug)  # type: ignore[arg-type]
                .values(status=SeasonStatus.ACTIVE, updated_at=now)
            )
    except _ActivationAborted as aborted:
        logger.info(f"Activation of season '{slug}' refused: {aborted.error.value}")
        return ActivationResult(ok=False, error=aborted.error)
    except Exception as exc:
        logger.exception(f"Activation of season '{slug}' rolled back")
        return ActivationResult(
            ok=False,
            error=ActivationError.TX_FAILED,
            detail=str(exc) or exc.__class__.__name__,
        )

    logger.info(f"Season '{slug}' is now active")
    return ActivationResult(ok=True)
