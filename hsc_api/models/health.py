"""Response models for operational endpoints."""

from typing import Optional

from sqlmodel import SQLModel


class CorsInfo(SQLModel):
    allowed_origin: str


class DbHealth(SQLModel):
    ready: bool
    error: Optional[str] = None


class HealthResponse(SQLModel):
    ok: bool = True
    service: str
    ts: str  # ISO-8601 UTC
    cors: CorsInfo
    db: DbHealth


class SchemaResponse(SQLModel):
    ok: bool = True
    version: Optional[int] = None
    tables: list[str]
