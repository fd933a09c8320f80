"""
Runtime settings.

Everything environment-tunable is read once into an immutable `Settings` value,
which `main.create_app()` hands to the components that need it.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Mapping

DEFAULT_SCHEMA = "contract_management_db"
DEFAULT_CORS_ORIGINS = ("http://localhost:5173", "http://127.0.0.1:5173")

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _env_str(env: Mapping[str, str], name: str, default: str) -> str:
    return (env.get(name) or "").strip() or default


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = (env.get(name) or "").strip().lower()
    if not raw:
        return default
    return raw == "true"


def _env_list(env: Mapping[str, str], name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class SessionCookieSettings:
    name: str = "cm_session"
    max_age_days: int = 7
    secure: bool = False
    header_name: str = "X-Session-Id"

    @property
    def max_age_seconds(self) -> int:
        return self.max_age_days * 24 * 60 * 60


@dataclass(frozen=True)
class Settings:
    database_url: str = ""
    db_schema: str = DEFAULT_SCHEMA
    session: SessionCookieSettings = field(default_factory=SessionCookieSettings)
    min_password_length: int = 8
    cors_allow_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"
    port: int = 3001

    def __post_init__(self) -> None:
        if not _IDENTIFIER.match(self.db_schema):
            raise ValueError(f"DB_SCHEMA is not a valid identifier: {self.db_schema!r}")

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env
        session = SessionCookieSettings(
            name=_env_str(env, "SESSION_COOKIE_NAME", "cm_session"),
            max_age_days=max(_env_int(env, "SESSION_MAX_AGE_DAYS", 7), 1),
            secure=_env_bool(env, "SESSION_COOKIE_SECURE", False),
            header_name=_env_str(env, "SESSION_HEADER_NAME", "X-Session-Id"),
        )
        return cls(
            database_url=(env.get("DATABASE_URL") or "").strip(),
            db_schema=_env_str(env, "DB_SCHEMA", DEFAULT_SCHEMA),
            session=session,
            min_password_length=max(_env_int(env, "MIN_PASSWORD_LENGTH", 8), 1),
            cors_allow_origins=_env_list(env, "CORS_ALLOW_ORIGINS", DEFAULT_CORS_ORIGINS),
            log_level=_env_str(env, "LOG_LEVEL", "INFO").upper(),
            port=_env_int(env, "PORT", 3001),
        )
