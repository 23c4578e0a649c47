"""
Small helpers shared by services: public URLs and UTC normalisation.
"""

from datetime import datetime, timezone
from typing import Optional

from .config import get_settings


def absolute_url(path: str, base: Optional[str] = None) -> str:
    """Join ``path`` onto ``base`` (PUBLIC_BASE_URL when omitted); absolute URLs pass through."""
    if path.startswith(("http://", "https://")):
        return path
    root = (base or get_settings().public_base_url).rstrip("/")
    return f"{root}/{path.lstrip('/')}"


def as_utc(value: datetime) -> datetime:
    """Normalize a datetime to UTC; naive values (SQLite) are assumed to be UTC."""
    return value.astimezone(timezone.utc) if value.tzinfo else value.replace(tzinfo=timezone.utc)
