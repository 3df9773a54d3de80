"""Password login and server-side session tokens."""

from __future__ import annotations

import base64
import hashlib
import hmac
import os
import secrets
from datetime import datetime, timedelta

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hsc_api.config import settings
from hsc_api.schemas.auth import Role, User, UserSession
from hsc_api.schemas.base import utcnow

PBKDF2_ITERATIONS = 210_000


def session_ttl() -> timedelta:
    return timedelta(minutes=settings.session_ttl_minutes)


def normalize_email(email: str) -> str:
    """Normalize an email address for storage and comparisons."""
    return email.strip().casefold()


def _b64decode(raw: str) -> bytes:
    padding = "=" * (-len(raw) % 4)
    return base64.urlsafe_b64decode(raw + padding)


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def hash_password(password: str, *, iterations: int = PBKDF2_ITERATIONS) -> str:
    """Return ``pbkdf2_sha256$<iterations>$<salt>$<digest>``."""
    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"pbkdf2_sha256${iterations}${_b64encode(salt)}${_b64encode(digest)}"


def verify_password(password: str, encoded_hash: str) -> bool:
    """Check a password against a stored hash in constant time."""
    try:
        algorithm, iterations_raw, salt_b64, digest_b64 = encoded_hash.split("$", 3)
        iterations = int(iterations_raw)
        salt = _b64decode(salt_b64)
        expected = _b64decode(digest_b64)
    except ValueError:
        return False

    if algorithm != "pbkdf2_sha256":
        return False

    actual = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return hmac.compare_digest(actual, expected)


def hash_session_token(raw_token: str) -> str:
    key = settings.secret_key.encode("utf-8")
    return hmac.new(key, raw_token.encode("utf-8"), hashlib.sha256).hexdigest()


def generate_session_token() -> str:
    """Generate a raw cookie token (stored only as a hash server-side)."""
    return secrets.token_urlsafe(32)


async def create_user(
    db: AsyncSession,
    *,
    email: str,
    password: str,
    role: Role = Role.MEMBER,
    display_name: str | None = None,
) -> User:
    """Insert a user with a freshly hashed password."""
    now = utcnow()
    user = User(
        email=normalize_email(email),
        display_name=display_name,
        role=role,
        is_active=True,
        password_hash=hash_password(password),
        created_at=now,
        updated_at=now,
    )
    async with db.begin():
        db.add(user)
        await db.flush()
    return user


async def authenticate_user(
    db: AsyncSession,
    *,
    email: str,
    password: str,
) -> User | None:
    """Return the active user for valid credentials, else None."""
    async with db.begin():
        result = await db.execute(
            select(User).where(
                User.email == normalize_email(email),  # type: ignore[arg-type]
                User.is_active.is_(True),  # type: ignore[attr-defined]
            )
        )
        user = result.scalar_one_or_none()
        if user is None or not verify_password(password, user.password_hash):
            return None

        await db.execute(
            update(User)
            .where(User.id == user.id)  # type: ignore[arg-type]
            .values(last_login_at=utcnow())
        )
    return user


async def issue_session(
    db: AsyncSession,
    *,
    user_id: int,
    ip: str | None = None,
    user_agent: str | None = None,
) -> tuple[str, datetime]:
    """Create a session row and return ``(raw_token, expires_at)``."""
    now = utcnow()
    raw_token = generate_session_token()
    expires_at = now + session_ttl()

    async with db.begin():
        db.add(
            UserSession(
                user_id=user_id,
                token_hash=hash_session_token(raw_token),
                created_at=now,
                expires_at=expires_at,
                revoked_at=None,
                ip=ip,
                user_agent=user_agent,
            )
        )

    return raw_token, expires_at


async def revoke_session(db: AsyncSession, *, raw_token: str) -> None:
    """Revoke a session token (idempotent)."""
    async with db.begin():
        await db.execute(
            update(UserSession)
            .where(
                UserSession.token_hash == hash_session_token(raw_token),  # type: ignore[arg-type]
                UserSession.revoked_at.is_(None),  # type: ignore[union-attr]
            )
            .values(revoked_at=utcnow())
        )


async def get_user_for_session_token(
    db: AsyncSession,
    *,
    raw_token: str,
) -> User | None:
    """Return the active user behind an unexpired, unrevoked session."""
    if not raw_token:
        return None

    async with db.begin():
        result = await db.execute(
            select(User)
            .join(UserSession, UserSession.user_id == User.id)  # type: ignore[arg-type]
            .where(
                UserSession.token_hash == hash_session_token(raw_token),  # type: ignore[arg-type]
                UserSession.revoked_at.is_(None),  # type: ignore[union-attr]
                UserSession.expires_at > utcnow(),  # type: ignore[operator,arg-type]
                User.is_active.is_(True),  # type: ignore[attr-defined]
            )
            .limit(1)
        )
        return result.scalar_one_or_none()
