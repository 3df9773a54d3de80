"""News article authoring and retrieval.

Admin operations work on any article; the public feed only ever sees
``published`` rows.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hsc_api.schemas.base import utcnow
from hsc_api.schemas.news import NewsArticle, NewsStatus
from hsc_api.services.errors import (
    InvalidFieldError,
    MissingFieldsError,
    NoFieldsToUpdateError,
    SlugAlreadyExistsError,
)
from hsc_api.utils.slug import normalize_slug

# Both the admin listing and the public feed are capped
FEED_LIMIT = 20

REQUIRED_ARTICLE_FIELDS = ["slug", "title", "content"]


def _clean_optional(value: Any) -> str | None:
    """Trim optional text; blank strings are stored as NULL."""
    if value is None:
        return None
    return str(value).strip() or None


def build_article_patch(patch: Mapping[str, Any]) -> dict[str, Any]:
    """Validate a patch request and return the column updates it implies.

    Null values mean "leave unchanged". Blank ``excerpt``/``image_url`` clear
    the column.

    Raises:
        InvalidFieldError: ``invalid_slug``, ``invalid_title`` or
            ``invalid_content``.
        NoFieldsToUpdateError: nothing to update.
    """
    values: dict[str, Any] = {}

    if patch.get("slug") is not None:
        clean_slug = normalize_slug(patch["slug"])
        if not clean_slug:
            raise InvalidFieldError("invalid_slug")
        values["slug"] = clean_slug

    if patch.get("title") is not None:
        title = str(patch["title"]).strip()
        if not title:
            raise InvalidFieldError("invalid_title")
        values["title"] = title

    if patch.get("excerpt") is not None:
        values["excerpt"] = _clean_optional(patch["excerpt"])

    if patch.get("content") is not None:
        content = str(patch["content"])
        if not content:
            raise InvalidFieldError("invalid_content")
        values["content"] = content

    if patch.get("image_url") is not None:
        values["image_url"] = _clean_optional(patch["image_url"])

    if not values:
        raise NoFieldsToUpdateError()
    return values


async def create_article(
    db: AsyncSession,
    *,
    slug: str,
    title: str,
    content: str,
    excerpt: str | None = None,
    image_url: str | None = None,
) -> NewsArticle:
    """Create a draft article.

    Raises:
        MissingFieldsError: slug, title or content is blank.
        InvalidFieldError: ``invalid_slug`` when the slug normalizes to nothing.
        SlugAlreadyExistsError: the slug is taken.
    """
    if not str(slug).strip() or not str(title).strip() or not content:
        raise MissingFieldsError(REQUIRED_ARTICLE_FIELDS)

    clean_slug = normalize_slug(slug)
    if not clean_slug:
        raise InvalidFieldError("invalid_slug")

    now = utcnow()
    article = NewsArticle(
        slug=clean_slug,
        title=str(title).strip(),
        excerpt=_clean_optional(excerpt),
        content=str(content),
        image_url=_clean_optional(image_url),
        status=NewsStatus.DRAFT,
        published_at=None,
        created_at=now,
        updated_at=now,
    )
    try:
        async with db.begin():
            db.add(article)
            await db.flush()
    except IntegrityError as exc:
        raise SlugAlreadyExistsError() from exc
    return article


async def list_articles(db: AsyncSession, *, limit: int = FEED_LIMIT) -> list[NewsArticle]:
    """Most recently created articles, any status."""
    async with db.begin():
        result = await db.execute(
            select(NewsArticle)
            .order_by(NewsArticle.created_at.desc())  # type: ignore[attr-defined]
            .limit(limit)
        )
        return list(result.scalars().all())


async def get_article(db: AsyncSession, article_id: int) -> NewsArticle | None:
    async with db.begin():
        result = await db.execute(
            select(NewsArticle)
            .where(NewsArticle.id == article_id)  # type: ignore[arg-type]
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()


async def _update_and_fetch(
    db: AsyncSession,
    article_id: int,
    *conditions: Any,
    **values: Any,
) -> NewsArticle | None:
    """Run a guarded UPDATE and return the fresh row, or None if nothing matched."""
    values["updated_at"] = utcnow()
    async with db.begin():
        result = await db.execute(
            update(NewsArticle)
            .where(NewsArticle.id == article_id, *conditions)  # type: ignore[arg-type]
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if not result.rowcount:  # type: ignore[attr-defined]
            return None
        fetched = await db.execute(
            select(NewsArticle)
            .where(NewsArticle.id == article_id)  # type: ignore[arg-type]
            .execution_options(populate_existing=True)
        )
        return fetched.scalar_one()


async def patch_article(
    db: AsyncSession, article_id: int, patch: Mapping[str, Any]
) -> NewsArticle | None:
    """Apply a validated partial update; None when the article does not exist."""
    values = build_article_patch(patch)
    try:
        return await _update_and_fetch(db, article_id, **values)
    except IntegrityError as exc:
        raise SlugAlreadyExistsError() from exc


async def publish_article(db: AsyncSession, article_id: int) -> NewsArticle | None:
    """Publish a draft; keeps an earlier ``published_at`` if one is set.

    Returns None when the article is missing or not a draft.
    """
    return await _update_and_fetch(
        db,
        article_id,
        NewsArticle.status == NewsStatus.DRAFT,
        status=NewsStatus.PUBLISHED,
        published_at=func.coalesce(NewsArticle.published_at, utcnow()),
    )


async def unpublish_article(db: AsyncSession, article_id: int) -> NewsArticle | None:
    """Move a published article back to draft and clear ``published_at``.

    Returns None when the article is missing or not published.
    """
    return await _update_and_fetch(
        db,
        article_id,
        NewsArticle.status == NewsStatus.PUBLISHED,
        status=NewsStatus.DRAFT,
        published_at=None,
    )


async def delete_article(db: AsyncSession, article_id: int) -> bool:
    async with db.begin():
        result = await db.execute(
            delete(NewsArticle)
            .where(NewsArticle.id == article_id)  # type: ignore[arg-type]
            .execution_options(synchronize_session=False)
        )
    return bool(result.rowcount)  # type: ignore[attr-defined]


async def list_published(db: AsyncSession, *, limit: int = FEED_LIMIT) -> list[NewsArticle]:
    """Public feed: newest published first."""
    async with db.begin():
        result = await db.execute(
            select(NewsArticle)
            .where(NewsArticle.status == NewsStatus.PUBLISHED)  # type: ignore[arg-type]
            .order_by(NewsArticle.published_at.desc())  # type: ignore[union-attr]
            .limit(limit)
        )
        return list(result.scalars().all())


async def get_published_by_slug(db: AsyncSession, slug: str) -> NewsArticle | None:
    async with db.begin():
        result = await db.execute(
            select(NewsArticle)
            .where(
                NewsArticle.slug == slug,  # type: ignore[arg-type]
                NewsArticle.status == NewsStatus.PUBLISHED,  # type: ignore[arg-type]
            )
            .limit(1)
        )
        return result.scalar_one_or_none()
