"""Admin season lifecycle endpoints (admins only)."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from hsc_api.models.seasons import (
    SeasonCreate,
    SeasonCreated,
    SeasonListResponse,
    SeasonPatch,
    SeasonRead,
    SeasonStatusChanged,
    SeasonUpdated,
)
from hsc_api.schemas.auth import Role
from hsc_api.schemas.seasons import SeasonStatus
from hsc_api.services import season_service
from hsc_api.services.authz import require_role
from hsc_api.services.errors import InvalidFieldError
from hsc_api.services.schema_service import require_db_ready
from hsc_api.services.season_service import ActivationError
from hsc_api.utils.db_async import get_session
from hsc_api.utils.slug import normalize_lookup_slug, normalize_slug

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/seasons",
    tags=["admin-seasons"],
    dependencies=[Depends(require_role(Role.ADMIN)), Depends(require_db_ready)],
)

# Activation failures -> (status code, public error code). Transaction
# failures are reported generically; the detail stays in the logs.
ACTIVATION_ERRORS: dict[ActivationError, tuple[int, str]] = {
    ActivationError.SEASON_NOT_FOUND: (404, "season_not_found"),
    ActivationError.SEASON_CLOSED: (409, "season_closed"),
    ActivationError.TX_FAILED: (500, "activation_failed"),
}


@router.get("", response_model=SeasonListResponse)
async def list_seasons(
    db: AsyncSession = Depends(get_session),
) -> SeasonListResponse:
    seasons = await season_service.list_seasons(db)
    return SeasonListResponse(
        seasons=[SeasonRead.model_validate(s, from_attributes=True) for s in seasons]
    )


@router.post("", response_model=SeasonCreated, status_code=201)
async def create_season(
    payload: SeasonCreate,
    db: AsyncSession = Depends(get_session),
) -> SeasonCreated:
    """Create a draft season."""
    season_id = await season_service.create_season(
        db,
        slug=payload.slug,
        name=payload.name,
        description=payload.description,
        start_at=payload.start_at,
        end_at=payload.end_at,
    )
    return SeasonCreated(
        id=season_id, slug=normalize_slug(payload.slug), status=SeasonStatus.DRAFT
    )


@router.patch("/{slug}", response_model=SeasonUpdated)
async def patch_season(
    slug: str,
    payload: SeasonPatch,
    db: AsyncSession = Depends(get_session),
) -> SeasonUpdated:
    """Update name, description or dates of a season that is not closed.

    ``updated`` is 0 when the body names no updatable field.
    """
    clean_slug = normalize_lookup_slug(slug)
    season = await season_service.get_season_by_slug(db, clean_slug)
    if season is None:
        raise HTTPException(status_code=404, detail="season_not_found")
    if season.status == SeasonStatus.CLOSED:
        raise HTTPException(status_code=409, detail="season_closed")

    changes = payload.model_dump(exclude_unset=True)
    values = season_service.build_season_patch(changes)
    if values.get("end_at", season.end_at) < values.get("start_at", season.start_at):
        raise InvalidFieldError("invalid_date_range")

    updated = await season_service.patch_season(db, clean_slug, changes)
    return SeasonUpdated(updated=updated)


@router.post("/{slug}/activate", response_model=SeasonStatusChanged)
async def activate_season(
    slug: str,
    db: AsyncSession = Depends(get_session),
) -> SeasonStatusChanged:
    """Make this season the only active one (demotes the current one to draft)."""
    clean_slug = normalize_lookup_slug(slug)
    result = await season_service.activate_season(db, clean_slug)
    if result.ok:
        return SeasonStatusChanged(slug=clean_slug, status=SeasonStatus.ACTIVE)

    error = result.error or ActivationError.TX_FAILED
    if error is ActivationError.TX_FAILED:
        logger.error(f"Activation of '{clean_slug}' failed: {result.detail}")
    status_code, code = ACTIVATION_ERRORS[error]
    raise HTTPException(status_code=status_code, detail=code)


@router.post("/{slug}/close", response_model=SeasonStatusChanged)
async def close_season(
    slug: str,
    db: AsyncSession = Depends(get_session),
) -> SeasonStatusChanged:
    """Close a season from any status; closing twice is allowed."""
    clean_slug = normalize_lookup_slug(slug)
    if not await season_service.close_season(db, clean_slug):
        raise HTTPException(status_code=404, detail="season_not_found")
    return SeasonStatusChanged(slug=clean_slug, status=SeasonStatus.CLOSED)
