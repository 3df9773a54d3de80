"""Single-row table recording the applied schema version."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from hsc_api.schemas.base import utcnow

SCHEMA_VERSION = 1


class SchemaMeta(SQLModel, table=True):  # type: ignore[call-arg]
    __tablename__ = "schema_meta"

    id: Optional[int] = Field(default=None, primary_key=True)
    version: int
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=False))
