from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _bool(name: str, default: bool) -> bool:
    value = _env(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _list(name: str, default: str = "") -> tuple[str, ...]:
    value = _env(name, default) or ""
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    database_url: str
    db_auto_create_schema: bool
    access_token_secret: str
    refresh_token_secret: str
    access_token_ttl_minutes: int
    refresh_token_ttl_days: int
    jwt_algorithm: str
    password_hash_rounds: int
    cookie_secure: bool
    revoke_sessions_on_password_change: bool
    cors_origins: tuple[str, ...]
    log_level: str


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        database_url=_env("DATABASE_URL", ""),
        db_auto_create_schema=_bool("DB_AUTO_CREATE_SCHEMA", True),
        access_token_secret=_env("ACCESS_TOKEN_SECRET", ""),
        refresh_token_secret=_env("REFRESH_TOKEN_SECRET", ""),
        access_token_ttl_minutes=int(_env("ACCESS_TOKEN_TTL_MINUTES", "60")),
        refresh_token_ttl_days=int(_env("REFRESH_TOKEN_TTL_DAYS", "10")),
        jwt_algorithm=_env("JWT_ALGORITHM", "HS256"),
        password_hash_rounds=int(_env("PASSWORD_HASH_ROUNDS", "10")),
        cookie_secure=_bool("COOKIE_SECURE", True),
        revoke_sessions_on_password_change=_bool("REVOKE_SESSIONS_ON_PASSWORD_CHANGE", False),
        cors_origins=_list("CORS_ORIGINS", "*"),
        log_level=_env("LOG_LEVEL", "INFO"),
    )
