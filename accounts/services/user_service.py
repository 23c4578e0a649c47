"""User profile use cases (admin CRUD and self-service updates)."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from accounts.core.errors import BadRequestError, NotFoundError
from accounts.db.models import User
from accounts.domain.query import UserQuery
from accounts.repositories.sql_repository import DuplicateEmailError, SQLRepository
from accounts.schemas.user import MeUpdate, UserUpdate

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User with that ID is not found"
NOT_FOR_PASSWORDS = "This route is not for password updates. Please use /updatePassword."
_ME_FIELDS = ("name", "email")
_NON_NULLABLE = ("email", "role", "active")


class UserService:
    """Reads and mutates user records through the repository."""

    def __init__(self, repository: SQLRepository | None = None) -> None:
        self.repository = repository or SQLRepository()

    def list_users(self, params: Mapping[str, str] | Iterable[tuple[str, str]]) -> list[dict[str, Any]]:
        query = UserQuery.from_params(params).filter().sort().limit_fields().paginate()
        return self.repository.list_users(query)

    def get_user(self, user_id: str) -> User:
        user = self.repository.get_user(user_id)
        if not user:
            raise NotFoundError(USER_NOT_FOUND)
        return user

    def _apply(self, user_id: str, values: dict[str, Any]) -> User:
        try:
            user = self.repository.update_user(user_id, values)
        except DuplicateEmailError:
            raise BadRequestError("An account with that email already exists.")
        if not user:
            raise NotFoundError(USER_NOT_FOUND)
        return user

    def update_user(self, user_id: str, payload: UserUpdate) -> User:
        values = payload.model_dump(exclude_unset=True)
        if "password" in values or "password_confirm" in values:
            raise BadRequestError(NOT_FOR_PASSWORDS)
        for key in _NON_NULLABLE:
            if key in values and values[key] is None:
                raise BadRequestError(f"Invalid input data. {key} cannot be null.")
        user = self._apply(user_id, values)
        logger.info("user %s updated fields %s", user_id, sorted(values))
        return user

    def delete_user(self, user_id: str) -> None:
        if not self.repository.delete_user(user_id):
            raise NotFoundError(USER_NOT_FOUND)
        logger.info("user %s deleted", user_id)

    def update_me(self, user: User, payload: MeUpdate) -> User:
        values = payload.model_dump(exclude_unset=True)
        if "password" in values or "password_confirm" in values:
            raise BadRequestError(NOT_FOR_PASSWORDS)
        values = {key: value for key, value in values.items() if key in _ME_FIELDS}
        if "email" in values and values["email"] is None:
            raise BadRequestError("Invalid input data. email cannot be null.")
        return self._apply(user.id, values)

    def delete_me(self, user: User) -> None:
        self.repository.deactivate_user(user.id)
        logger.info("user %s deactivated their account", user.id)
