"""Admin news article management (editors and admins)."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from hsc_api.models.news import (
    NewsArticleCreate,
    NewsArticleCreated,
    NewsArticleDeleted,
    NewsArticleListResponse,
    NewsArticlePatch,
    NewsArticleResponse,
)
from hsc_api.routes.admin.helpers import article_read, parse_positive_id
from hsc_api.schemas.auth import Role
from hsc_api.services import news_service
from hsc_api.services.authz import require_role
from hsc_api.services.schema_service import require_db_ready
from hsc_api.utils.db_async import get_session

router = APIRouter(
    prefix="/news",
    tags=["admin-news"],
    dependencies=[Depends(require_role(Role.EDITOR)), Depends(require_db_ready)],
)


@router.post("", response_model=NewsArticleCreated, status_code=201)
async def create_article(
    payload: NewsArticleCreate,
    db: AsyncSession = Depends(get_session),
) -> NewsArticleCreated:
    """Create a draft article."""
    article = await news_service.create_article(
        db,
        slug=payload.slug,
        title=payload.title,
        content=payload.content,
        excerpt=payload.excerpt,
        image_url=payload.image_url,
    )
    assert article.id is not None
    return NewsArticleCreated(id=article.id, slug=article.slug, status=article.status)


@router.get("", response_model=NewsArticleListResponse)
async def list_articles(
    db: AsyncSession = Depends(get_session),
) -> NewsArticleListResponse:
    """Latest articles in any status, newest first."""
    articles = await news_service.list_articles(db)
    return NewsArticleListResponse(
        count=len(articles),
        items=[article_read(article) for article in articles],
    )


@router.patch("/{article_id}", response_model=NewsArticleResponse)
async def patch_article(
    article_id: str,
    payload: NewsArticlePatch,
    db: AsyncSession = Depends(get_session),
) -> NewsArticleResponse:
    article = await news_service.patch_article(
        db, parse_positive_id(article_id), payload.model_dump(exclude_unset=True)
    )
    if article is None:
        raise HTTPException(status_code=404, detail="not_found")
    return NewsArticleResponse(item=article_read(article))


@router.post("/{article_id}/publish", response_model=NewsArticleResponse)
async def publish_article(
    article_id: str,
    db: AsyncSession = Depends(get_session),
) -> NewsArticleResponse:
    article = await news_service.publish_article(db, parse_positive_id(article_id))
    if article is None:
        raise HTTPException(status_code=404, detail="not_found_or_not_draft")
    return NewsArticleResponse(item=article_read(article))


@router.post("/{article_id}/unpublish", response_model=NewsArticleResponse)
async def unpublish_article(
    article_id: str,
    db: AsyncSession = Depends(get_session),
) -> NewsArticleResponse:
    article = await news_service.unpublish_article(db, parse_positive_id(article_id))
    if article is None:
        raise HTTPException(status_code=404, detail="not_found_or_not_published")
    return NewsArticleResponse(item=article_read(article))


@router.delete("/{article_id}", response_model=NewsArticleDeleted)
async def delete_article(
    article_id: str,
    db: AsyncSession = Depends(get_session),
) -> NewsArticleDeleted:
    clean_id = parse_positive_id(article_id)
    if not await news_service.delete_article(db, clean_id):
        raise HTTPException(status_code=404, detail="not_found")
    return NewsArticleDeleted(deleted=clean_id)
