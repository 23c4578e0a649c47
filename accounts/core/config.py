"""
Configuration helpers for the accounts backend.

Routers and services receive a Settings instance instead of reading
os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os
import re


_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400, "w": 604800}


def parse_duration(value: str | int | None, default: int) -> int:
    """Convert values such as "90d", "12h" or "3600" into seconds."""
    if value is None:
        return default
    if isinstance(value, int):
        return value
    match = _DURATION_RE.match(value)
    if not match:
        return default
    amount, unit = match.groups()
    return int(amount) * _DURATION_UNITS[unit.lower()]


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    public_base_url: str
    jwt_secret: str
    jwt_expires_in: int
    jwt_algorithm: str
    password_reset_ttl: int
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    smtp_from: str
    cors_origins: tuple[str, ...]
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _csv(value: str | None) -> tuple[str, ...]:
        return tuple(item.strip().rstrip("/") for item in (value or "").split(",") if item.strip())

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./accounts.db"),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/"),
        jwt_secret=os.getenv("SECRET_STR", ""),
        jwt_expires_in=parse_duration(os.getenv("LOGIN_EXPIRES"), 90 * 86400),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        password_reset_ttl=_int(os.getenv("PASSWORD_RESET_TTL", "600"), 600),
        smtp_host=os.getenv("SMTP_HOST", ""),
        smtp_port=_int(os.getenv("SMTP_PORT", "465"), 465),
        smtp_user=os.getenv("SMTP_USER", ""),
        smtp_password=os.getenv("SMTP_PASSWORD", ""),
        smtp_from=os.getenv("SMTP_FROM", os.getenv("SMTP_USER", "")),
        cors_origins=_csv(os.getenv("CORS_ORIGINS")),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
