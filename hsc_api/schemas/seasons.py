"""Season table and its status lifecycle."""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime, Index, text
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field

from hsc_api.schemas.base import TimestampMixin, enum_values


class SeasonStatus(str, Enum):
    """Season lifecycle states. ``CLOSED`` is terminal."""

    DRAFT = "draft"
    ACTIVE = "active"
    CLOSED = "closed"


class Season(TimestampMixin, table=True):  # type: ignore[call-arg]
    """A competitive season. At most one row may be ``active`` at a time."""

    __tablename__ = "seasons"
    __table_args__ = (
        # Storage-level guarantee of the single-active rule
        Index(
            "uq_seasons_single_active",
            "status",
            unique=True,
            postgresql_where=text("status = 'active'"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(unique=True, index=True)
    name: str
    description: Optional[str] = Field(default=None)
    start_at: datetime = Field(index=True, sa_type=DateTime(timezone=False))
    end_at: datetime = Field(sa_type=DateTime(timezone=False))
    status: SeasonStatus = Field(
        default=SeasonStatus.DRAFT,
        sa_column=Column(
            SAEnum(SeasonStatus, name="season_status", values_callable=enum_values),
            nullable=False,
            index=True,
            server_default=SeasonStatus.DRAFT.value,
        ),
    )
