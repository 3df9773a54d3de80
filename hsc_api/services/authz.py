"""Role-based authorization for admin endpoints.

Two separate concerns live here:

- *who is calling* (``resolve_principal``): the ``X-Admin-Key`` header or the
  session cookie, each producing a ``Principal`` with a role;
- *what that role may do* (``AuthorizationPolicy``): a pure decision on a
  resolved role and the minimum role an endpoint requires.

Endpoints only declare ``Depends(require_role(Role.EDITOR))``; adding a new
credential type means teaching ``resolve_principal`` about it, nothing else.
"""

from __future__ import annotations

import hmac
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Literal, Protocol

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hsc_api.config import settings
from hsc_api.schemas.auth import Role
from hsc_api.services.auth_service import get_user_for_session_token
from hsc_api.services.schema_service import require_db_ready
from hsc_api.utils.db_async import get_session

ADMIN_KEY_HEADER = "x-admin-key"

ROLE_RANK: dict[Role, int] = {
    Role.MEMBER: 0,
    Role.EDITOR: 1,
    Role.ADMIN: 2,
}

PrincipalSource = Literal["admin_key", "session"]


@dataclass(frozen=True)
class Principal:
    """An authenticated caller, however it was established."""

    role: Role
    source: PrincipalSource
    user_id: int | None = None
    email: str | None = None


class AuthorizationPolicy(Protocol):
    def allows(self, role: Role, required: Role) -> bool: ...


class RankedRolePolicy:
    """A role satisfies every requirement at or below its own rank."""

    def __init__(self, ranks: dict[Role, int] | None = None):
        self.ranks = ranks or ROLE_RANK

    def allows(self, role: Role, required: Role) -> bool:
        return self.ranks[role] >= self.ranks[required]


DEFAULT_POLICY: AuthorizationPolicy = RankedRolePolicy()


def has_capability(
    role: Role,
    required: Role,
    policy: AuthorizationPolicy = DEFAULT_POLICY,
) -> bool:
    return policy.allows(role, required)


def admin_key_matches(provided: str | None, configured: str | None) -> bool:
    """Constant-time key check; an unset key never matches."""
    if not configured or not provided:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), configured.encode("utf-8"))


async def resolve_principal(request: Request, db: AsyncSession) -> Principal | None:
    """Identify the caller from the admin key header, then the session cookie."""
    if admin_key_matches(request.headers.get(ADMIN_KEY_HEADER), settings.admin_key):
        return Principal(role=Role.ADMIN, source="admin_key")

    raw_token = request.cookies.get(settings.cookie_name)
    if not raw_token:
        return None

    # Session lookups need the schema; the admin key does not
    await require_db_ready(request)

    user = await get_user_for_session_token(db, raw_token=raw_token)
    if user is None:
        return None
    return Principal(role=user.role, source="session", user_id=user.id, email=user.email)


async def get_current_principal(
    request: Request,
    db: AsyncSession = Depends(get_session),
) -> Principal:
    """Resolve the caller or raise 401."""
    principal = await resolve_principal(request, db)
    if principal is None:
        raise HTTPException(status_code=401, detail="unauthorized")
    return principal


def require_role(
    required: Role,
    policy: AuthorizationPolicy = DEFAULT_POLICY,
) -> Callable[..., Awaitable[Principal]]:
    """FastAPI dependency enforcing a minimum role (raises 401/403)."""

    async def _dependency(
        principal: Principal = Depends(get_current_principal),
    ) -> Principal:
        if not has_capability(principal.role, required, policy):
            raise HTTPException(status_code=403, detail="forbidden")
        return principal

    return _dependency
