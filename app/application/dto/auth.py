from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AuthUserOutput:
    id: str
    username: str
    email: str
    full_name: str
    phone: str
    avatar: str
    user_type: str
    user_verified: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class RegisterUserInput:
    username: str
    email: str
    full_name: str
    password: str
    phone: str | None = None
    user_type: str | None = None
    avatar: str | None = None
    fcm_token: str | None = None


@dataclass(frozen=True)
class LoginInput:
    email: str | None
    phone: str | None
    password: str


@dataclass(frozen=True)
class RefreshSessionInput:
    refresh_token: str | None


@dataclass(frozen=True)
class LogoutInput:
    user_id: str


@dataclass(frozen=True)
class ChangePasswordInput:
    user_id: str
    old_password: str
    new_password: str


@dataclass(frozen=True)
class AuthTokensOutput:
    user: AuthUserOutput
    access_token: str
    refresh_token: str
    access_expires_at: datetime
    refresh_expires_at: datetime


@dataclass(frozen=True)
class AccessTokenPayload:
    user_id: str
    email: str
    username: str
    full_name: str


@dataclass(frozen=True)
class RefreshTokenPayload:
    user_id: str
