# hsc_api/config.py
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str
    secret_key: str
    env: Literal["dev", "stage", "prod"] = "dev"
    debug: bool = False
    log_level: str = "INFO"
    access_log: bool = True
    sql_echo: bool = False
    auto_init_db: bool = True
    service_name: str = "hsc-auth-api"

    # Shared key accepted in the X-Admin-Key header (disabled when unset)
    admin_key: Optional[str] = None

    # CORS: exactly one browser origin, no trailing slash
    allowed_origin: str = "https://auth.haxixesmokeclub.com"

    # Session cookie
    cookie_name: str = "hsc_sid"
    cookie_samesite: Literal["lax", "strict", "none"] = "lax"
    cookie_secure: bool = True
    session_ttl_minutes: int = 60 * 24 * 7

    @field_validator("allowed_origin")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/") or "https://auth.haxixesmokeclub.com"

    @field_validator("cookie_name")
    @classmethod
    def _strip_cookie_name(cls, value: str) -> str:
        return value.strip() or "hsc_sid"

    @field_validator("cookie_samesite", mode="before")
    @classmethod
    def _lower_samesite(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value

    @property
    def is_dev(self) -> bool:
        return self.env == "dev" or self.debug is True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]
