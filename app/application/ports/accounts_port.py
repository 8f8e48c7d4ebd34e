from __future__ import annotations

from datetime import datetime
from typing import Protocol

from app.domain.entities.user import User, UserCredentials


class AccountsPort(Protocol):
    def get_user_by_id(self, *, user_id: str) -> User | None:
        ...

    def get_user_by_email(self, *, email: str) -> User | None:
        ...

    def get_user_by_username(self, *, username: str) -> User | None:
        ...

    def find_user_by_email_or_phone(self, *, email: str | None, phone: str | None) -> User | None:
        ...

    def get_credentials(self, *, user_id: str) -> UserCredentials | None:
        ...

    def create_user(
        self,
        *,
        user_id: str,
        username: str,
        email: str,
        full_name: str,
        phone: str,
        avatar: str,
        user_type: str,
        fcm_token: str,
        password_hash: str,
        created_at: datetime,
    ) -> User:
        ...

    def update_account_details(
        self,
        *,
        user_id: str,
        full_name: str,
        email: str,
        phone: str,
        updated_at: datetime,
    ) -> User | None:
        ...

    def update_password_hash(
        self,
        *,
        user_id: str,
        password_hash: str,
        clear_refresh_token: bool,
        updated_at: datetime,
    ) -> None:
        ...

    def set_refresh_token(self, *, user_id: str, refresh_token: str) -> None:
        ...

    def rotate_refresh_token(self, *, user_id: str, expected: str, replacement: str) -> bool:
        """Swap the stored refresh token only if it still equals ``expected``."""
        ...

    def clear_refresh_token(self, *, user_id: str) -> None:
        ...

    def delete_user(self, *, user_id: str) -> bool:
        ...
