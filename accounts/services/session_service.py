"""Token transport helpers (bearer header and cookie)."""
from __future__ import annotations

from fastapi import Request, Response

TOKEN_COOKIE_NAME = "jwt"


def token_from_request(request: Request) -> str | None:
    """Return the bearer token from the Authorization header, falling back to the cookie."""
    header = request.headers.get("authorization") or ""
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return request.cookies.get(TOKEN_COOKIE_NAME) or None


def set_token_cookie(response: Response, token: str, *, max_age: int, secure: bool) -> None:
    response.set_cookie(
        TOKEN_COOKIE_NAME,
        token,
        httponly=True,
        secure=secure,
        samesite="strict",
        max_age=max_age,
        path="/",
    )


def clear_token_cookie(response: Response) -> None:
    response.delete_cookie(TOKEN_COOKIE_NAME, path="/")
