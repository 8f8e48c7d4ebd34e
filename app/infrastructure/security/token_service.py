from __future__ import annotations

import secrets
from datetime import datetime, timedelta

import jwt

from app.application.dto.auth import AccessTokenPayload, RefreshTokenPayload
from app.application.ports.token_port import TokenPort
from app.domain.entities.user import User
from app.domain.exceptions import ConfigurationError, TokenExpiredError, TokenInvalidError


class JwtTokenService(TokenPort):
    def __init__(
        self,
        *,
        access_secret: str,
        refresh_secret: str,
        access_ttl_minutes: int,
        refresh_ttl_days: int,
        algorithm: str = "HS256",
    ):
        if not access_secret or not refresh_secret:
            raise ConfigurationError("Access and refresh token secrets are required.")
        if access_secret == refresh_secret:
            raise ConfigurationError("Access and refresh token secrets must differ.")
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self._access_ttl_minutes = access_ttl_minutes
        self._refresh_ttl_days = refresh_ttl_days
        self._algorithm = algorithm

    def issue_access_token(self, *, user: User, now: datetime) -> tuple[str, datetime]:
        exp = now + timedelta(minutes=self._access_ttl_minutes)
        payload = {
            "sub": user.id,
            "id": user.id,
            "email": user.email,
            "username": user.username,
            "full_name": user.full_name,
            "type": "access",
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
        }
        token = jwt.encode(payload, self._access_secret, algorithm=self._algorithm)
        return token, exp

    def issue_refresh_token(self, *, user: User, now: datetime) -> tuple[str, datetime]:
        exp = now + timedelta(days=self._refresh_ttl_days)
        payload = {
            "sub": user.id,
            "id": user.id,
            "type": "refresh",
            "jti": secrets.token_hex(16),
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
        }
        token = jwt.encode(payload, self._refresh_secret, algorithm=self._algorithm)
        return token, exp

    def decode_access_token(self, *, token: str) -> AccessTokenPayload:
        payload = self._decode(token, secret=self._access_secret, expected_type="access")
        return AccessTokenPayload(
            user_id=payload["sub"],
            email=str(payload.get("email") or ""),
            username=str(payload.get("username") or ""),
            full_name=str(payload.get("full_name") or ""),
        )

    def verify_refresh_token(self, *, token: str) -> RefreshTokenPayload:
        payload = self._decode(token, secret=self._refresh_secret, expected_type="refresh")
        return RefreshTokenPayload(user_id=payload["sub"])

    def _decode(self, token: str, *, secret: str, expected_type: str) -> dict:
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError(f"{expected_type.capitalize()} token expired.") from exc
        except jwt.PyJWTError as exc:
            raise TokenInvalidError(f"Invalid {expected_type} token.") from exc

        if payload.get("type") != expected_type:
            raise TokenInvalidError("Invalid token type.")

        subject = payload.get("sub")
        if not subject or not isinstance(subject, str):
            raise TokenInvalidError("Invalid token subject.")

        return payload
