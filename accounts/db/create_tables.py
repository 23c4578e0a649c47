"""Create the accounts schema (users, reset_tokens).

Run as ``python -m accounts.db.create_tables``; the app also calls
``create_all`` from its lifespan with its own database URL.
"""
from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # registers User/ResetToken on Base.metadata


def create_all(database_url: str | None = None) -> None:
    Base.metadata.create_all(bind=get_engine(database_url))


if __name__ == "__main__":
    try:
        create_all()
        print("Database tables created successfully.")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
