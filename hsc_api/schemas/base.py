"""Base Classes to Use as MixIns Elsewhere in App"""

from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Naive UTC timestamp; DATETIME columns hold UTC by contract."""
    return datetime.now(UTC).replace(tzinfo=None)


def enum_values(enum_cls: type[Enum]) -> list[str]:
    """Persist enum values ("draft") rather than member names ("DRAFT")."""
    return [member.value for member in enum_cls]


class TimestampMixin(SQLModel):
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=False))
