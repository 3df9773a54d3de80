"""Pydantic request/response models for seasons."""

from datetime import UTC, datetime
from typing import Optional

from pydantic import field_validator, model_validator
from sqlmodel import SQLModel

from hsc_api.schemas.seasons import SeasonStatus


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Store aware timestamps as naive UTC; naive input is taken as UTC already."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


class SeasonRead(SQLModel):
    """Response model for a single season."""

    id: int
    slug: str
    name: str
    description: Optional[str] = None
    start_at: datetime
    end_at: datetime
    status: SeasonStatus
    created_at: datetime
    updated_at: datetime


class SeasonCreate(SQLModel):
    """Request model for creating a season (always starts as draft)."""

    slug: str
    name: str
    description: Optional[str] = None
    start_at: datetime
    end_at: datetime

    @field_validator("start_at", "end_at")
    @classmethod
    def _naive_utc(cls, value: datetime) -> datetime:
        return to_naive_utc(value)  # type: ignore[return-value]

    @model_validator(mode="after")
    def _check_range(self) -> "SeasonCreate":
        if self.end_at < self.start_at:
            raise ValueError("end_at must not be before start_at")
        return self


class SeasonPatch(SQLModel):
    """Request model for a partial season update.

    Only keys present in the request body are forwarded; ``description: null``
    clears the description, a null name or date is ignored.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None

    @field_validator("start_at", "end_at")
    @classmethod
    def _naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)

    @model_validator(mode="after")
    def _check_range(self) -> "SeasonPatch":
        if self.start_at and self.end_at and self.end_at < self.start_at:
            raise ValueError("end_at must not be before start_at")
        return self


class SeasonListResponse(SQLModel):
    ok: bool = True
    seasons: list[SeasonRead]


class SeasonResponse(SQLModel):
    ok: bool = True
    season: SeasonRead


class SeasonCreated(SQLModel):
    ok: bool = True
    id: int
    slug: str
    status: SeasonStatus


class SeasonUpdated(SQLModel):
    ok: bool = True
    updated: int


class SeasonStatusChanged(SQLModel):
    """Response for activate/close: the season's slug and new status."""

    ok: bool = True
    slug: str
    status: SeasonStatus
