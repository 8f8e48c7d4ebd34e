from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import Boolean, DateTime, bindparam, text
from sqlalchemy.exc import IntegrityError

from app.application.ports.accounts_port import AccountsPort
from app.domain.exceptions import ConflictError
from app.infrastructure.db.mappers.users_mapper import map_row_to_credentials, map_row_to_user


logger = logging.getLogger(__name__)

_USER_COLUMNS = """
    id, username, email, full_name, phone, avatar, user_type, user_verified, created_at, updated_at
"""


def _select_users(where: str):
    return text(
        f"""
        SELECT {_USER_COLUMNS}
        FROM users
        WHERE {where}
        LIMIT 1
        """
    ).columns(
        created_at=DateTime(timezone=True),
        updated_at=DateTime(timezone=True),
        user_verified=Boolean,
    )


def _timestamps(*names: str):
    return [bindparam(name, type_=DateTime(timezone=True)) for name in names]


class SqlAccountsRepository(AccountsPort):
    def __init__(self, engine):
        self._engine = engine

    def _fetch_user(self, where: str, params: dict):
        with self._engine.connect() as conn:
            row = conn.execute(_select_users(where), params).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def get_user_by_id(self, *, user_id: str):
        return self._fetch_user("id = :user_id", {"user_id": user_id})

    def get_user_by_email(self, *, email: str):
        return self._fetch_user("email = :email", {"email": email.lower()})

    def get_user_by_username(self, *, username: str):
        return self._fetch_user("username = :username", {"username": username.lower()})

    def find_user_by_email_or_phone(self, *, email: str | None, phone: str | None):
        clauses = []
        params = {}
        if email:
            clauses.append("email = :email")
            params["email"] = email.lower()
        if phone:
            clauses.append("phone = :phone")
            params["phone"] = phone
        if not clauses:
            return None
        return self._fetch_user(" OR ".join(clauses), params)

    def get_credentials(self, *, user_id: str):
        sql = """
            SELECT id, password_hash, refresh_token
            FROM users
            WHERE id = :user_id
            LIMIT 1
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"user_id": user_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_credentials(row)

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
    ):
        sql = """
            INSERT INTO users (
                id, username, email, full_name, phone, avatar, user_type,
                password_hash, refresh_token, fcm_token, user_verified, created_at, updated_at
            ) VALUES (
                :id, :username, :email, :full_name, :phone, :avatar, :user_type,
                :password_hash, NULL, :fcm_token, :user_verified, :created_at, :updated_at
            )
        """
        params = {
            "id": user_id,
            "username": username,
            "email": email,
            "full_name": full_name,
            "phone": phone,
            "avatar": avatar,
            "user_type": user_type,
            "password_hash": password_hash,
            "fcm_token": fcm_token,
            "user_verified": False,
            "created_at": created_at,
            "updated_at": created_at,
        }
        try:
            with self._engine.begin() as conn:
                conn.execute(text(sql).bindparams(*_timestamps("created_at", "updated_at")), params)
                row = conn.execute(_select_users("id = :user_id"), {"user_id": user_id}).mappings().one()
        except IntegrityError as exc:
            logger.warning("accounts_repository: create_user_conflict username=%s email=%s", username, email)
            raise ConflictError("Email or username already used.") from exc
        return map_row_to_user(row)

    def update_account_details(
        self,
        *,
        user_id: str,
        full_name: str,
        email: str,
        phone: str,
        updated_at: datetime,
    ):
        sql = """
            UPDATE users
            SET full_name = :full_name,
                email = :email,
                phone = :phone,
                updated_at = :updated_at
            WHERE id = :user_id
        """
        params = {
            "user_id": user_id,
            "full_name": full_name,
            "email": email,
            "phone": phone,
            "updated_at": updated_at,
        }
        try:
            with self._engine.begin() as conn:
                result = conn.execute(text(sql).bindparams(*_timestamps("updated_at")), params)
                if result.rowcount == 0:
                    return None
                row = conn.execute(_select_users("id = :user_id"), {"user_id": user_id}).mappings().one()
        except IntegrityError as exc:
            raise ConflictError("Email already used.") from exc
        return map_row_to_user(row)

    def update_password_hash(
        self,
        *,
        user_id: str,
        password_hash: str,
        clear_refresh_token: bool,
        updated_at: datetime,
    ) -> None:
        if clear_refresh_token:
            sql = """
                UPDATE users
                SET password_hash = :password_hash,
                    refresh_token = NULL,
                    updated_at = :updated_at
                WHERE id = :user_id
            """
        else:
            sql = """
                UPDATE users
                SET password_hash = :password_hash,
                    updated_at = :updated_at
                WHERE id = :user_id
            """
        with self._engine.begin() as conn:
            conn.execute(
                text(sql).bindparams(*_timestamps("updated_at")),
                {"user_id": user_id, "password_hash": password_hash, "updated_at": updated_at},
            )

    def set_refresh_token(self, *, user_id: str, refresh_token: str) -> None:
        sql = """
            UPDATE users
            SET refresh_token = :refresh_token
            WHERE id = :user_id
        """
        with self._engine.begin() as conn:
            conn.execute(text(sql), {"user_id": user_id, "refresh_token": refresh_token})

    def rotate_refresh_token(self, *, user_id: str, expected: str, replacement: str) -> bool:
        sql = """
            UPDATE users
            SET refresh_token = :replacement
            WHERE id = :user_id
              AND refresh_token = :expected
        """
        with self._engine.begin() as conn:
            result = conn.execute(
                text(sql),
                {"user_id": user_id, "expected": expected, "replacement": replacement},
            )
            rotated = result.rowcount == 1
        return rotated

    def clear_refresh_token(self, *, user_id: str) -> None:
        sql = """
            UPDATE users
            SET refresh_token = NULL
            WHERE id = :user_id
        """
        with self._engine.begin() as conn:
            conn.execute(text(sql), {"user_id": user_id})

    def delete_user(self, *, user_id: str) -> bool:
        with self._engine.begin() as conn:
            result = conn.execute(text("DELETE FROM users WHERE id = :user_id"), {"user_id": user_id})
            deleted = result.rowcount == 1
        return deleted
