from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from accounts.db.models import User
from accounts.routers.deps import get_auth_service, get_user_service, protect, restrict
from accounts.schemas.user import (
    ForgotPasswordRequest,
    LoginRequest,
    MeUpdate,
    ResetPasswordRequest,
    UpdatePasswordRequest,
    UserCreate,
    UserRead,
    UserUpdate,
)
from accounts.services.auth_service import RESET_SENT, AuthService
from accounts.services.session_service import clear_token_cookie, set_token_cookie
from accounts.services.user_service import UserService

router = APIRouter(prefix="/api/v1/users", tags=["users"])
admin_only = [Depends(protect), Depends(restrict("admin"))]


def _user_payload(user: User) -> dict:
    return UserRead.model_validate(user).model_dump(mode="json")


def _set_cookie(response: Response, token: str, auth: AuthService) -> None:
    settings = auth.settings
    set_token_cookie(response, token, max_age=settings.jwt_expires_in, secure=settings.app_env == "prod")


def _token_response(response: Response, token: str, auth: AuthService) -> dict:
    _set_cookie(response, token, auth)
    return {"status": "success", "token": token}


@router.get("", dependencies=admin_only)
def get_all_users(request: Request, users: UserService = Depends(get_user_service)):
    result = users.list_users(request.query_params.multi_items())
    return {"status": "success", "length": len(result), "data": {"users": result}}


@router.post("/signup", status_code=201)
def create_user(payload: UserCreate, response: Response, auth: AuthService = Depends(get_auth_service)):
    result = auth.signup(payload)
    _set_cookie(response, result.token, auth)
    return {"status": "success", "token": result.token, "data": {"user": _user_payload(result.user)}}


@router.post("/login")
def login_user(
    response: Response,
    payload: Optional[LoginRequest] = None,
    auth: AuthService = Depends(get_auth_service),
):
    payload = payload or LoginRequest()
    token = auth.login(payload.email, payload.password)
    return _token_response(response, token, auth)


@router.post("/forgotPassword")
def forgot_password(payload: Optional[ForgotPasswordRequest] = None, auth: AuthService = Depends(get_auth_service)):
    auth.forgot_password((payload or ForgotPasswordRequest()).email)
    return {"status": "success", "message": RESET_SENT}


@router.patch("/resetPassword/{token}")
def reset_password(
    token: str,
    payload: ResetPasswordRequest,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
):
    return _token_response(response, auth.reset_password(token, payload.password), auth)


@router.patch("/updatePassword")
def update_password(
    payload: UpdatePasswordRequest,
    response: Response,
    user: User = Depends(protect),
    auth: AuthService = Depends(get_auth_service),
):
    token = auth.update_password(user, payload.password_current, payload.password)
    return _token_response(response, token, auth)


@router.patch("/updateMe")
def update_me(payload: MeUpdate, user: User = Depends(protect), users: UserService = Depends(get_user_service)):
    updated = users.update_me(user, payload)
    return {"status": "success", "data": {"user": _user_payload(updated)}}


@router.patch("/deleteMe", status_code=204)
def delete_me(user: User = Depends(protect), users: UserService = Depends(get_user_service)):
    users.delete_me(user)
    response = Response(status_code=204)
    clear_token_cookie(response)
    return response


@router.get("/{user_id}", dependencies=admin_only)
def get_user_by_id(user_id: str, users: UserService = Depends(get_user_service)):
    return {"status": "success", "data": {"user": _user_payload(users.get_user(user_id))}}


@router.patch("/{user_id}", dependencies=admin_only)
def update_user(user_id: str, payload: UserUpdate, users: UserService = Depends(get_user_service)):
    updated = users.update_user(user_id, payload)
    return {"status": "success", "data": {"user": _user_payload(updated)}}


@router.delete("/{user_id}", status_code=204, dependencies=admin_only)
def delete_user(user_id: str, users: UserService = Depends(get_user_service)):
    users.delete_user(user_id)
    return Response(status_code=204)
