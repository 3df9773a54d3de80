"""Shared helpers for admin routes."""

from fastapi import HTTPException

from hsc_api.models.news import NewsArticleRead
from hsc_api.schemas.news import NewsArticle


def parse_positive_id(raw: str) -> int:
    """Parse a path id; anything but a positive integer is ``400 invalid_id``."""
    raw = raw.strip()
    if not (raw.isascii() and raw.isdigit()) or int(raw) <= 0:
        raise HTTPException(status_code=400, detail="invalid_id")
    return int(raw)


def article_read(article: NewsArticle) -> NewsArticleRead:
    return NewsArticleRead.model_validate(article, from_attributes=True)
