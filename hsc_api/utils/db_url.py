"""Database URL handling shared by the app engine and Alembic.

Hosted Postgres URLs usually carry libpq options (``sslmode``,
``channel_binding``) that asyncpg rejects; they are translated here.
Importing this module does not load application settings.
"""

import ssl
from typing import Any, Dict, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from sqlalchemy.engine import make_url

# Query args understood by libpq but rejected by asyncpg
_LIBPQ_ONLY_ARGS = {"sslmode", "channel_binding"}

def normalize_db_url(url: str) -> str:
    """Select the asyncpg driver for bare ``postgres://``/``postgresql://`` URLs.

    An explicit driver (``postgresql+psycopg://``) is left alone.
    """
    try:
        u = make_url(url)
    except Exception:
        for prefix in ("postgresql://", "postgres://"):
            if url.startswith(prefix):
                return "postgresql+asyncpg://" + url.split("://", 1)[1]
        return url

    driver = (u.drivername or "").lower()
    if "+" not in driver and driver in ("postgres", "postgresql"):
        u = u.set(drivername="postgresql+asyncpg")
    return u.render_as_string(hide_password=False)


def ssl_connect_arg(sslmode: str) -> Any:
    """Translate a libpq ``sslmode`` into the value asyncpg expects for ``ssl``.

    Returns ``None`` when the driver default (opportunistic TLS) should apply.
    """
    mode = sslmode.lower()
    if mode == "disable":
        return False
    if mode in {"allow", "prefer"}:
        return None
    if mode == "require":
        ctx = ssl.create_default_context()
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
        return ctx
    if mode == "verify-ca":
        ctx = ssl.create_default_context()
        ctx.check_hostname = False
        return ctx
    # verify-full and anything unrecognised get full verification
    return ssl.create_default_context()


def prepare_connection(url: str) -> Tuple[str, Dict[str, Any]]:
    """Return ``(url, connect_args)`` ready for ``create_async_engine``."""
    split = urlsplit(normalize_db_url(url))
    pairs = parse_qsl(split.query, keep_blank_values=True)

    sslmode = next((value for key, value in pairs if key == "sslmode"), None)
    kept = [(key, value) for key, value in pairs if key not in _LIBPQ_ONLY_ARGS]
    cleaned_url = urlunsplit(split._replace(query=urlencode(kept, doseq=True))).rstrip("?")

    connect_args: Dict[str, Any] = {}
    if sslmode:
        ssl_arg = ssl_connect_arg(sslmode)
        if ssl_arg is not None:
            connect_args["ssl"] = ssl_arg
    return cleaned_url, connect_args


def describe_database_url(url: str) -> str:
    """Return a sanitized, human-readable description of the DB URL for logging.

    Example: "postgresql+asyncpg://user@host:5432/dbname"
    Passwords are never included.
    """
    try:
        u = make_url(url)
        auth = u.username or "?"
        host = u.host or "?"
        port = f":{u.port}" if u.port else ""
        db = u.database or "?"
        return f"{u.drivername}://{auth}@{host}{port}/{db}"
    except Exception:
        return "<unparseable database URL>"
