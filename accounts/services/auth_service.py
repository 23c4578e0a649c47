"""
Authentication and identity related use cases.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from accounts.core.config import Settings, get_settings
from accounts.core.errors import BadRequestError, UnauthorizedError
from accounts.core.mailer import send_email
from accounts.core.security import digest_token, hash_password, new_reset_token, verify_password
from accounts.core.tokens import TokenSigner
from accounts.core.utils import absolute_url, as_utc
from accounts.db.models import User
from accounts.repositories.sql_repository import DuplicateEmailError, SQLRepository
from accounts.schemas.user import UserCreate

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS = "Please provide email ID and Password for login!"
INVALID_CREDENTIALS = "Incorrect email or password."
RESET_SENT = "If that email is registered, a reset link has been sent."


@dataclass
class SignupResult:
    user: User
    token: str


@dataclass
class AuthService:
    """Handles signup, login, token verification and the password flows."""

    settings: Settings = field(default_factory=get_settings)
    repository: Optional[SQLRepository] = None
    signer: Optional[TokenSigner] = None

    def __post_init__(self):
        if self.repository is None:
            self.repository = SQLRepository(self.settings.database_url)
        if self.signer is None:
            self.signer = TokenSigner.from_settings(self.settings)

    # -------------------------------------- helpers --------------------------------------
    def _now(self) -> int:
        return int(time.time())

    def _token_expired(self, created_at: datetime | int | None, now: int, *, ttl_seconds: int) -> bool:
        if ttl_seconds <= 0:
            return False
        if isinstance(created_at, datetime):
            created_ts = int(as_utc(created_at).timestamp())
        else:
            created_ts = int(created_at or 0)
        if not created_ts:
            return True
        return (created_ts + ttl_seconds) < now

    def _changed_password_after(self, user: User, issued_at: float) -> bool:
        if not user.password_changed_at:
            return False
        return as_utc(user.password_changed_at).timestamp() > issued_at

    def sign_token(self, user_id: str) -> str:
        return self.signer.sign(user_id)

    # -------------------------------------- signup --------------------------------------
    def signup(self, payload: UserCreate) -> SignupResult:
        try:
            user = self.repository.create_user(
                payload.email,
                hash_password(payload.password),
                name=payload.name,
            )
        except DuplicateEmailError:
            raise BadRequestError("An account with that email already exists.")
        logger.info("user %s signed up", user.id)
        return SignupResult(user=user, token=self.sign_token(user.id))

    # -------------------------------------- login --------------------------------------
    def login(self, email: str | None, password: str | None) -> str:
        raw_email = (email or "").strip()
        if not raw_email or not password:
            raise BadRequestError(MISSING_CREDENTIALS)
        user = self.repository.get_user_by_email(raw_email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning("failed login attempt")
            raise BadRequestError(INVALID_CREDENTIALS)
        return self.sign_token(user.id)

    # -------------------------------------- guard --------------------------------------
    def authenticate(self, token: str | None) -> User:
        """Resolve a bearer token to the active user it was issued for."""
        if not token:
            raise UnauthorizedError("You are not logged in! Please log in to get access.")
        claims = self.signer.decode(token)
        user = self.repository.get_user(str(claims["id"]))
        if not user:
            raise UnauthorizedError("The user belonging to this token no longer exists.")
        if self._changed_password_after(user, float(claims["iat"])):
            raise UnauthorizedError("User recently changed password! Please log in again.")
        return user

    # -------------------------------------- password reset --------------------------------------
    def forgot_password(self, email: str | None) -> None:
        raw = (email or "").strip()
        if not raw:
            raise BadRequestError("Please provide your email address.")
        user = self.repository.get_user_by_email(raw)
        if not user:
            return
        self.repository.delete_reset_tokens_for_user(user.id)
        token = new_reset_token()
        self.repository.create_reset_token(user.id, digest_token(token))
        reset_url = absolute_url(f"/api/v1/users/resetPassword/{token}", base=self.settings.public_base_url)
        html_body = f"""
        <p>Hello!</p>
        <p>We received a request to reset your password. Submit a PATCH request with your new
        password and passwordConfirm to:</p>
        <p><a href="{reset_url}">{reset_url}</a></p>
        <p>The link is valid for {max(1, self.settings.password_reset_ttl // 60)} minutes.
        If you didn't forget your password, please ignore this email.</p>
        """
        sent = send_email(
            "Your password reset token",
            user.email,
            html_body,
            f"Forgot your password? Submit a PATCH request with your new password to: {reset_url}",
            settings=self.settings,
        )
        if not sent:
            logger.warning("reset email for user %s was not delivered", user.id)

    def reset_password(self, token: str, password: str) -> str:
        digest = digest_token((token or "").strip())
        entity = self.repository.get_reset_token(digest)
        now = self._now()
        if not entity or self._token_expired(entity.created_at, now, ttl_seconds=self.settings.password_reset_ttl):
            if entity:
                self.repository.delete_reset_token(digest)
            raise BadRequestError("Token is invalid or has expired")
        user = self.repository.get_user(entity.user_id)
        if not user:
            self.repository.delete_reset_token(digest)
            raise BadRequestError("Token is invalid or has expired")
        self.repository.update_user_password(user.id, hash_password(password))
        self.repository.delete_reset_tokens_for_user(user.id)
        logger.info("password reset for user %s", user.id)
        return self.sign_token(user.id)

    def update_password(self, user: User, current_password: str, new_password: str) -> str:
        fresh = self.repository.get_user(user.id)
        if not fresh or not verify_password(current_password, fresh.password_hash):
            raise UnauthorizedError("Your current password is wrong.")
        self.repository.update_user_password(fresh.id, hash_password(new_password))
        logger.info("password updated for user %s", fresh.id)
        return self.sign_token(fresh.id)
