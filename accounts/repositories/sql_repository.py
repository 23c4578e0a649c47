"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

import operator
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import Boolean, DateTime, delete, select, update
from sqlalchemy.exc import IntegrityError

from accounts.core.errors import BadRequestError
from accounts.core.utils import as_utc
from accounts.db.models import ResetToken, User
from accounts.db.session import get_session
from accounts.domain.query import UserQuery

_COMPARATORS = {
    "eq": operator.eq,
    "gte": operator.ge,
    "gt": operator.gt,
    "lte": operator.le,
    "lt": operator.lt,
}
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


class DuplicateEmailError(Exception):
    """Raised when the unique email constraint rejects a write."""


def _coerce(column, raw: str) -> Any:
    """Convert a query-string value into the python type of the column."""
    if isinstance(column.type, Boolean):
        value = raw.strip().lower()
        if value in _TRUTHY:
            return True
        if value in _FALSY:
            return False
        raise BadRequestError(f"Invalid value for {column.key}: {raw!r}")
    if isinstance(column.type, DateTime):
        try:
            parsed = datetime.fromisoformat(raw.strip())
        except ValueError:
            raise BadRequestError(f"Invalid value for {column.key}: {raw!r}")
        return as_utc(parsed)
    return raw


class SQLRepository:
    """CRUD helpers wrapping the SQLAlchemy session."""

    def __init__(self, database_url: str | None = None) -> None:
        self.database_url = database_url

    # -------------------------- users --------------------------
    def get_user(self, user_id: str) -> Optional[User]:
        """Return an active user by id."""
        with get_session(self.database_url) as session:
            user = session.get(User, user_id)
            if user is None or not user.active:
                return None
            return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        with get_session(self.database_url) as session:
            stmt = select(User).where(User.email == email.strip().lower(), User.active.is_(True))
            return session.execute(stmt).scalar_one_or_none()

    def create_user(self, email: str, password_hash: str, name: str | None = None) -> User:
        now = datetime.now(timezone.utc)
        entity = User(
            email=email.strip().lower(),
            name=name,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        with get_session(self.database_url) as session:
            session.add(entity)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateEmailError(email) from exc
            session.refresh(entity)
            return entity

    def update_user(self, user_id: str, values: dict[str, Any]) -> Optional[User]:
        """Apply a partial update and return the refreshed user, or None when the id does not resolve."""
        with get_session(self.database_url) as session:
            user = session.get(User, user_id)
            if user is None or not user.active:
                return None
            for key, value in values.items():
                if key == "email" and value is not None:
                    value = value.strip().lower()
                setattr(user, key, value)
            user.updated_at = datetime.now(timezone.utc)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateEmailError(values.get("email", "")) from exc
            session.refresh(user)
            return user

    def update_user_password(self, user_id: str, password_hash: str) -> None:
        now = datetime.now(timezone.utc)
        with get_session(self.database_url) as session:
            stmt = (
                update(User)
                .where(User.id == user_id)
                .values(password_hash=password_hash, password_changed_at=now, updated_at=now)
            )
            session.execute(stmt)
            session.commit()

    def deactivate_user(self, user_id: str) -> None:
        with get_session(self.database_url) as session:
            stmt = (
                update(User)
                .where(User.id == user_id)
                .values(active=False, updated_at=datetime.now(timezone.utc))
            )
            session.execute(stmt)
            session.commit()

    def delete_user(self, user_id: str) -> bool:
        """Hard delete; returns False when no active user had that id."""
        with get_session(self.database_url) as session:
            user = session.get(User, user_id)
            if user is None or not user.active:
                return False
            session.delete(user)
            session.commit()
            return True

    def list_users(self, query: UserQuery) -> list[dict[str, Any]]:
        columns = [getattr(User, name) for name in query.selected_fields()]
        stmt = select(*columns).where(User.active.is_(True))
        for condition in query.conditions:
            column = getattr(User, condition.field)
            compare = _COMPARATORS[condition.op]
            stmt = stmt.where(compare(column, _coerce(column, condition.value)))
        for ordering in query.ordering:
            column = getattr(User, ordering.field)
            stmt = stmt.order_by(column.desc() if ordering.descending else column.asc())
        stmt = stmt.order_by(User.id.asc())
        if query.offset:
            stmt = stmt.offset(query.offset)
        if query.limit is not None:
            stmt = stmt.limit(query.limit)
        with get_session(self.database_url) as session:
            return [dict(row._mapping) for row in session.execute(stmt)]

    # -------------------------- reset tokens --------------------------
    def create_reset_token(self, user_id: str, token_digest: str) -> None:
        with get_session(self.database_url) as session:
            session.add(ResetToken(token_digest=token_digest, user_id=user_id, created_at=datetime.now(timezone.utc)))
            session.commit()

    def get_reset_token(self, token_digest: str) -> Optional[ResetToken]:
        with get_session(self.database_url) as session:
            return session.get(ResetToken, token_digest)

    def delete_reset_tokens_for_user(self, user_id: str) -> None:
        with get_session(self.database_url) as session:
            session.execute(delete(ResetToken).where(ResetToken.user_id == user_id))
            session.commit()

    def delete_reset_token(self, token_digest: str) -> None:
        with get_session(self.database_url) as session:
            session.execute(delete(ResetToken).where(ResetToken.token_digest == token_digest))
            session.commit()
