"""Integration-test helpers for users, login and admin requests."""

from __future__ import annotations

import base64
import hashlib
import os
from datetime import UTC, datetime

from httpx import AsyncClient, Response
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

PBKDF2_SHA256_PREFIX = "pbkdf2_sha256"


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def pbkdf2_sha256_hash(
    password: str,
    *,
    iterations: int = 1_000,
    salt: bytes | None = None,
) -> str:
    """Return a password hash in the stored format (few iterations, for speed).

    Format: "pbkdf2_sha256$<iterations>$<salt_b64>$<digest_b64>"
    """
    if salt is None:
        salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"{PBKDF2_SHA256_PREFIX}${iterations}${_b64encode(salt)}${_b64encode(dk)}"


async def create_user_row(
    db_session: AsyncSession,
    *,
    email: str,
    role: str,
    password: str,
    is_active: bool = True,
) -> int:
    """Insert a user row directly and return its id."""
    now = datetime.now(UTC).replace(tzinfo=None)
    async with db_session.begin():
        result = await db_session.execute(
            text(
                """
                INSERT INTO users (
                    email,
                    role,
                    is_active,
                    password_hash,
                    created_at,
                    updated_at
                )
                VALUES (
                    :email,
                    CAST(:role AS user_role),
                    :is_active,
                    :password_hash,
                    :created_at,
                    :updated_at
                )
                RETURNING id
                """
            ),
            {
                "email": email.casefold(),
                "role": role,
                "is_active": is_active,
                "password_hash": pbkdf2_sha256_hash(password),
                "created_at": now,
                "updated_at": now,
            },
        )
        user_id = result.scalar_one()
    return int(user_id)


async def login(app_client: AsyncClient, *, email: str, password: str) -> Response:
    """Log in via the JSON API; the client keeps the session cookie."""
    return await app_client.post(
        "/auth/login", json={"email": email, "password": password}
    )


def admin_key_headers() -> dict[str, str]:
    """Headers authenticating as admin through the shared key."""
    from hsc_api.config import settings

    assert settings.admin_key, "ADMIN_KEY must be set for integration tests"
    return {"X-Admin-Key": settings.admin_key}
