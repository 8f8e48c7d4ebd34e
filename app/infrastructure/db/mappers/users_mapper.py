from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from app.domain.entities.user import User, UserCredentials


def _as_str(value: Any) -> str:
    return str(value)


def _as_aware(value: Any) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def map_row_to_user(row: Mapping[str, Any]) -> User:
    return User(
        id=_as_str(row["id"]),
        username=row["username"],
        email=row["email"],
        full_name=row["full_name"],
        phone=row.get("phone") or "",
        avatar=row.get("avatar") or "",
        user_type=row["user_type"],
        user_verified=bool(row["user_verified"]),
        created_at=_as_aware(row["created_at"]),
        updated_at=_as_aware(row["updated_at"]),
    )


def map_row_to_credentials(row: Mapping[str, Any]) -> UserCredentials:
    return UserCredentials(
        user_id=_as_str(row["id"]),
        password_hash=row["password_hash"],
        refresh_token=row.get("refresh_token"),
    )
