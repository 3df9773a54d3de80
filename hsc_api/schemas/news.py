"""News articles authored through the admin API."""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime, Text
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field

from hsc_api.schemas.base import TimestampMixin, enum_values


class NewsStatus(str, Enum):
    """Publication state of a news article."""

    DRAFT = "draft"
    PUBLISHED = "published"


class NewsArticle(TimestampMixin, table=True):  # type: ignore[call-arg]
    """A news article; only ``published`` rows are visible on /content."""

    __tablename__ = "news"

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(unique=True, index=True, max_length=255)
    title: str = Field(max_length=255)
    excerpt: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    content: str = Field(sa_column=Column(Text, nullable=False))
    image_url: Optional[str] = Field(default=None, max_length=500)
    status: NewsStatus = Field(
        default=NewsStatus.DRAFT,
        sa_column=Column(
            SAEnum(NewsStatus, name="news_status", values_callable=enum_values),
            nullable=False,
            index=True,
            server_default=NewsStatus.DRAFT.value,
        ),
    )
    published_at: Optional[datetime] = Field(
        default=None, index=True, sa_type=DateTime(timezone=False)
    )
