from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, get_args


UserType = Literal["user", "admin", "moderator", "super-admin"]

USER_TYPES: tuple[str, ...] = get_args(UserType)
DEFAULT_USER_TYPE: UserType = "user"


@dataclass(frozen=True)
class User:
    id: str
    username: str
    email: str
    full_name: str
    phone: str
    avatar: str
    user_type: UserType
    user_verified: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class UserCredentials:
    user_id: str
    password_hash: str
    refresh_token: str | None
