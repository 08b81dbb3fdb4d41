"""Form schemas for sign-in and recovery pages.

Email fields are plain strings on purpose: accounts are provisioned from the
CLI without format checks, so the repository lookup is the only gate.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from lighthouse.core.auth.errors import PasswordMismatch


class LoginForm(BaseModel):
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        return v.strip()


class ForgotPasswordForm(BaseModel):
    email: str = Field(min_length=1, max_length=255)

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v):
        return v.strip() if isinstance(v, str) else v


class ResetPasswordForm(BaseModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=1)
    confirm_password: str = Field(min_length=1)

    def check_confirmation(self) -> None:
        if self.password != self.confirm_password:
            raise PasswordMismatch()
