from __future__ import annotations

from datetime import datetime, timezone

from email_validator import EmailNotValidError, validate_email

from app.application.dto.auth import AuthTokensOutput, AuthUserOutput
from app.application.ports.token_port import TokenPort
from app.domain.entities.user import User
from app.domain.exceptions import ValidationError


MIN_PASSWORD_LENGTH = 6


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def normalize_username(username: str | None) -> str:
    return (username or "").strip().lower()


def clean(value: str | None) -> str:
    return (value or "").strip()


def ensure_valid_email(email: str) -> None:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationError("Invalid email format.") from exc


def ensure_valid_password(password: str | None) -> None:
    if password is None or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")


def build_auth_user_output(user: User) -> AuthUserOutput:
    return AuthUserOutput(
        id=user.id,
        username=user.username,
        email=user.email,
        full_name=user.full_name,
        phone=user.phone,
        avatar=user.avatar,
        user_type=user.user_type,
        user_verified=user.user_verified,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def mint_tokens(*, user: User, token_port: TokenPort, now: datetime) -> AuthTokensOutput:
    """Sign a fresh access/refresh pair. Callers persist the refresh token before returning it."""
    access_token, access_expires_at = token_port.issue_access_token(user=user, now=now)
    refresh_token, refresh_expires_at = token_port.issue_refresh_token(user=user, now=now)
    return AuthTokensOutput(
        user=build_auth_user_output(user),
        access_token=access_token,
        refresh_token=refresh_token,
        access_expires_at=access_expires_at,
        refresh_expires_at=refresh_expires_at,
    )
