"""User accounts and server-side sessions.

Sessions back the session cookie; the raw cookie token is never stored, only
its HMAC.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import Column, DateTime
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field, SQLModel

from hsc_api.schemas.base import TimestampMixin, enum_values, utcnow


class Role(str, Enum):
    """Account roles, lowest privilege first."""

    MEMBER = "member"
    EDITOR = "editor"
    ADMIN = "admin"


class User(TimestampMixin, table=True):  # type: ignore[call-arg]
    """Account that can sign in and hold a role."""

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    display_name: str | None = Field(default=None, max_length=255)
    role: Role = Field(
        default=Role.MEMBER,
        sa_column=Column(
            SAEnum(Role, name="user_role", values_callable=enum_values),
            nullable=False,
            index=True,
            server_default=Role.MEMBER.value,
        ),
    )
    is_active: bool = Field(default=True, index=True)
    password_hash: str

    last_login_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=False))


class UserSession(SQLModel, table=True):  # type: ignore[call-arg]
    """Server-side session for a signed-in user (cookie token is hashed)."""

    __tablename__ = "sessions"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    token_hash: str = Field(unique=True, index=True)

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=False))
    expires_at: datetime = Field(index=True, sa_type=DateTime(timezone=False))
    revoked_at: datetime | None = Field(
        default=None, index=True, sa_type=DateTime(timezone=False)
    )

    ip: str | None = Field(default=None)
    user_agent: str | None = Field(default=None)
