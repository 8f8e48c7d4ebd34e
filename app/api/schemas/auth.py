from __future__ import annotations

from datetime import datetime

from pydantic import Field

from app.api.schemas.envelope import CamelModel


class RegisterRequest(CamelModel):
    username: str = Field(..., max_length=64)
    email: str = Field(..., max_length=255)
    full_name: str = Field(..., max_length=120)
    password: str = Field(..., max_length=256)
    phone: str | None = Field(default=None, max_length=32)
    user_type: str | None = None
    avatar: str | None = None
    fcm_token: str | None = None


class LoginRequest(CamelModel):
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=32)
    password: str = Field(..., max_length=256)


class RefreshTokenRequest(CamelModel):
    refresh_token: str | None = None


class ChangePasswordRequest(CamelModel):
    old_password: str = Field(..., max_length=256)
    new_password: str = Field(..., max_length=256)


class UserResponse(CamelModel):
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


class LoginData(CamelModel):
    user: UserResponse
    access_token: str
    refresh_token: str


class RefreshData(CamelModel):
    access_token: str
    refresh_token: str
