"""Error types raised by services and guards.

Handlers never build error responses themselves: they raise an ApiError and
the exception handlers registered in ``accounts.app`` render the envelope.
"""

from __future__ import annotations


class ApiError(Exception):
    """Operational error carrying the HTTP status the client should receive."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    @property
    def status(self) -> str:
        return "fail" if 400 <= self.status_code < 500 else "error"


class BadRequestError(ApiError):
    status_code = 400


class UnauthorizedError(ApiError):
    status_code = 401


class ForbiddenError(ApiError):
    status_code = 403


class NotFoundError(ApiError):
    status_code = 404
