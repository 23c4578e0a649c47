"""Request guards and service lookups shared by the routers.

Guards are plain FastAPI dependencies. A route lists them in order
(``protect`` first, then ``restrict(...)``); each either returns normally or
raises an ApiError that short-circuits the chain.
"""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, Request

from accounts.core.errors import ForbiddenError
from accounts.db.models import User
from accounts.services.auth_service import AuthService
from accounts.services.session_service import token_from_request
from accounts.services.user_service import UserService


def get_auth_service(request: Request) -> AuthService:
    svc = getattr(getattr(request.app, "state", None), "auth_service", None)
    if not svc:
        raise RuntimeError("AuthService not configured")
    return svc


def get_user_service(request: Request) -> UserService:
    svc = getattr(getattr(request.app, "state", None), "user_service", None)
    if not svc:
        raise RuntimeError("UserService not configured")
    return svc


def protect(request: Request, auth: AuthService = Depends(get_auth_service)) -> User:
    user = auth.authenticate(token_from_request(request))
    request.state.user = user
    return user


def restrict(*roles: str) -> Callable[..., User]:
    allowed = frozenset(roles)

    def guard(user: User = Depends(protect)) -> User:
        if user.role not in allowed:
            raise ForbiddenError("You do not have permission to perform this action")
        return user

    return guard
