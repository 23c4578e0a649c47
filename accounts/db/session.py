"""Engine/session helpers for the SQL backend.

Engines are cached per database URL; callers holding their own Settings pass
``settings.database_url`` and fall back to the environment otherwise.
"""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from accounts.core.config import get_settings

Base = declarative_base()


def _resolve_url(database_url: str | None) -> str:
    url = (database_url or get_settings().database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL must be configured to use the SQL backend.")
    return url


@lru_cache
def _engine_for(url: str):
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, future=True, pool_pre_ping=True, connect_args=connect_args)


@lru_cache
def _sessionmaker_for(url: str):
    return sessionmaker(bind=_engine_for(url), autoflush=False, autocommit=False, future=True)


def get_engine(database_url: str | None = None):
    return _engine_for(_resolve_url(database_url))


def reset_engines() -> None:
    """Forget cached engines so the next call re-reads DATABASE_URL."""
    for engine_cache in (_sessionmaker_for, _engine_for):
        engine_cache.cache_clear()


@contextmanager
def get_session(database_url: str | None = None) -> Session:
    session: Session = _sessionmaker_for(_resolve_url(database_url))()
    try:
        yield session
    finally:
        session.close()
