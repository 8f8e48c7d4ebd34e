from __future__ import annotations

from datetime import datetime
from typing import Protocol

from app.application.dto.auth import AccessTokenPayload, RefreshTokenPayload
from app.domain.entities.user import User


class TokenPort(Protocol):
    def issue_access_token(self, *, user: User, now: datetime) -> tuple[str, datetime]:
        ...

    def issue_refresh_token(self, *, user: User, now: datetime) -> tuple[str, datetime]:
        ...

    def decode_access_token(self, *, token: str) -> AccessTokenPayload:
        ...

    def verify_refresh_token(self, *, token: str) -> RefreshTokenPayload:
        ...
