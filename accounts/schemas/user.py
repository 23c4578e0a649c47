from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

Role = Literal["user", "guide", "lead-guide", "admin"]
MIN_PASSWORD_LENGTH = 8


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class _PasswordPair(_Body):
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    password_confirm: Optional[str] = Field(default=None, alias="passwordConfirm")

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password_confirm is not None and self.password_confirm != self.password:
            raise ValueError("Passwords are not the same!")
        return self


class UserCreate(_PasswordPair):
    name: Optional[str] = Field(default=None, max_length=255)
    email: EmailStr


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: Optional[str] = None
    email: str
    role: str
    active: bool
    created_at: datetime
    updated_at: datetime


class LoginRequest(_Body):
    email: Optional[str] = None
    password: Optional[str] = None


class UserUpdate(_Body):
    """Admin update; fields left out of the body are not touched."""

    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[EmailStr] = None
    role: Optional[Role] = None
    active: Optional[bool] = None
    password: Optional[str] = None
    password_confirm: Optional[str] = Field(default=None, alias="passwordConfirm")


class MeUpdate(_Body):
    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    password_confirm: Optional[str] = Field(default=None, alias="passwordConfirm")


class ForgotPasswordRequest(_Body):
    email: Optional[str] = None


class ResetPasswordRequest(_PasswordPair):
    password_confirm: str = Field(alias="passwordConfirm")


class UpdatePasswordRequest(_PasswordPair):
    password_current: str = Field(alias="passwordCurrent")
    password_confirm: str = Field(alias="passwordConfirm")
