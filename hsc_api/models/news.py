"""Pydantic request/response models for news articles."""

from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel

from hsc_api.schemas.news import NewsStatus


class NewsArticleRead(SQLModel):
    """Response model for a news article."""

    id: int
    slug: str
    title: str
    excerpt: Optional[str] = None
    content: str
    image_url: Optional[str] = None
    status: NewsStatus
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class NewsArticleCreate(SQLModel):
    """Request model for creating a draft article."""

    slug: str
    title: str
    content: str
    excerpt: Optional[str] = None
    image_url: Optional[str] = None


class NewsArticlePatch(SQLModel):
    """Request model for a partial article update; nulls are ignored."""

    slug: Optional[str] = None
    title: Optional[str] = None
    excerpt: Optional[str] = None
    content: Optional[str] = None
    image_url: Optional[str] = None


class NewsArticleCreated(SQLModel):
    ok: bool = True
    id: int
    slug: str
    status: NewsStatus


class NewsArticleResponse(SQLModel):
    ok: bool = True
    item: NewsArticleRead


class NewsArticleListResponse(SQLModel):
    ok: bool = True
    count: int
    items: list[NewsArticleRead]


class NewsArticleDeleted(SQLModel):
    ok: bool = True
    deleted: int
