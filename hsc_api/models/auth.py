"""Pydantic models for login and the current principal."""

from typing import Optional

from sqlmodel import SQLModel

from hsc_api.schemas.auth import Role


class LoginRequest(SQLModel):
    email: str
    password: str


class UserRead(SQLModel):
    id: int
    email: str
    display_name: Optional[str] = None
    role: Role


class LoginResponse(SQLModel):
    ok: bool = True
    user: UserRead


class PrincipalRead(SQLModel):
    """Who the caller is and how that was established."""

    role: Role
    source: str  # "admin_key" or "session"
    user_id: Optional[int] = None
    email: Optional[str] = None


class MeResponse(SQLModel):
    ok: bool = True
    principal: PrincipalRead
