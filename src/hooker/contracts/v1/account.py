"""User account, login and access token contracts."""

from __future__ import annotations

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import Field

from .common import HookerModel, Id


class UserDto(HookerModel):
    id: Id
    email: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    email_verified: bool = False
    created_at: str  # ISO timestamp
    updated_at: str


class LoginBody(HookerModel):
    email: str
    password: str


class LoginErrorCode(str, Enum):
    NEEDS_VERIFIED = "needsVerified"
    INVALID_CREDENTIALS = "invalidCredentials"


class LoginSuccessDto(HookerModel):
    success: Literal[True] = True
    user: UserDto


class LoginErrorDto(HookerModel):
    success: Literal[False] = False
    error_code: LoginErrorCode


LoginResultDto = Union[LoginSuccessDto, LoginErrorDto]


class RegisterBody(HookerModel):
    id: Id
    email: str
    password: str


class ChangePasswordBody(HookerModel):
    # Required when the account already has a password.
    current_password: Optional[str] = None
    new_password: str


class ResetPasswordBody(HookerModel):
    code: str = Field(pattern=r"^[A-Z]{8}$")
    new_password: str


class VerifyEmailBody(HookerModel):
    code: str = Field(pattern=r"^[A-Z]{8}$")


class DeleteAccountBody(HookerModel):
    password: Optional[str] = None


class AccessTokenDto(HookerModel):
    id: Id
    token: str
    description: str
    last_used: Optional[float] = None
    timestamp: float

    def __repr__(self) -> str:
        return f"AccessTokenDto(id={self.id!r}, description={self.description!r}, token='***REDACTED***')"


class AccessTokenBody(HookerModel):
    description: str


__all__ = [
    "AccessTokenBody",
    "AccessTokenDto",
    "ChangePasswordBody",
    "DeleteAccountBody",
    "LoginBody",
    "LoginErrorCode",
    "LoginErrorDto",
    "LoginResultDto",
    "LoginSuccessDto",
    "RegisterBody",
    "ResetPasswordBody",
    "UserDto",
    "VerifyEmailBody",
]
