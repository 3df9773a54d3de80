"""Public read-only content: published news and seasons."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from hsc_api.models.news import NewsArticleListResponse, NewsArticleRead, NewsArticleResponse
from hsc_api.models.seasons import SeasonListResponse, SeasonRead, SeasonResponse
from hsc_api.services import news_service, season_service
from hsc_api.services.schema_service import require_db_ready
from hsc_api.utils.db_async import get_session
from hsc_api.utils.slug import normalize_lookup_slug

router = APIRouter(
    prefix="/content",
    tags=["content"],
    dependencies=[Depends(require_db_ready)],
)


@router.get("/news", response_model=NewsArticleListResponse)
async def published_news(
    db: AsyncSession = Depends(get_session),
) -> NewsArticleListResponse:
    """Latest published articles, newest first."""
    articles = await news_service.list_published(db)
    return NewsArticleListResponse(
        count=len(articles),
        items=[NewsArticleRead.model_validate(a, from_attributes=True) for a in articles],
    )


@router.get("/news/{slug}", response_model=NewsArticleResponse)
async def published_article(
    slug: str,
    db: AsyncSession = Depends(get_session),
) -> NewsArticleResponse:
    article = await news_service.get_published_by_slug(db, normalize_lookup_slug(slug))
    if article is None:
        raise HTTPException(status_code=404, detail="not_found")
    return NewsArticleResponse(item=NewsArticleRead.model_validate(article, from_attributes=True))


@router.get("/seasons", response_model=SeasonListResponse)
async def seasons(db: AsyncSession = Depends(get_session)) -> SeasonListResponse:
    rows = await season_service.list_seasons(db)
    return SeasonListResponse(
        seasons=[SeasonRead.model_validate(s, from_attributes=True) for s in rows]
    )


# Declared before /seasons/{slug} so "active" is not taken as a slug
@router.get("/seasons/active", response_model=SeasonResponse)
async def active_season(db: AsyncSession = Depends(get_session)) -> SeasonResponse:
    """The currently active season; 404 when none is active."""
    season = await season_service.get_active_season(db)
    if season is None:
        raise HTTPException(status_code=404, detail="no_active_season")
    return SeasonResponse(season=SeasonRead.model_validate(season, from_attributes=True))


@router.get("/seasons/{slug}", response_model=SeasonResponse)
async def season_by_slug(
    slug: str,
    db: AsyncSession = Depends(get_session),
) -> SeasonResponse:
    season = await season_service.get_season_by_slug(db, normalize_lookup_slug(slug))
    if season is None:
        raise HTTPException(status_code=404, detail="season_not_found")
    return SeasonResponse(season=SeasonRead.model_validate(season, from_attributes=True))
