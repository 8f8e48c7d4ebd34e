from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from app.domain.entities.user import User, UserCredentials
from app.domain.exceptions import ConflictError
from app.infrastructure.security.token_service import JwtTokenService


ACCESS_SECRET = "access-secret-for-tests-0123456789abcdef"
REFRESH_SECRET = "refresh-secret-for-tests-0123456789abcdef"


class FakeAccountsPort:
    def __init__(self):
        self.users: dict[str, User] = {}
        self.password_hashes: dict[str, str] = {}
        self.refresh_tokens: dict[str, str | None] = {}

    def get_user_by_id(self, *, user_id: str) -> User | None:
        return self.users.get(user_id)

    def get_user_by_email(self, *, email: str) -> User | None:
        for user in self.users.values():
            if user.email == email.lower():
                return user
        return None

    def get_user_by_username(self, *, username: str) -> User | None:
        for user in self.users.values():
            if user.username == username.lower():
                return user
        return None

    def find_user_by_email_or_phone(self, *, email: str | None, phone: str | None) -> User | None:
        for user in self.users.values():
            if email and user.email == email.lower():
                return user
            if phone and user.phone == phone:
                return user
        return None

    def get_credentials(self, *, user_id: str) -> UserCredentials | None:
        if user_id not in self.users:
            return None
        return UserCredentials(
            user_id=user_id,
            password_hash=self.password_hashes[user_id],
            refresh_token=self.refresh_tokens.get(user_id),
        )

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
        if self.get_user_by_email(email=email) or self.get_user_by_username(username=username):
            raise ConflictError("Email or username already used.")
        user = User(
            id=user_id,
            username=username,
            email=email,
            full_name=full_name,
            phone=phone,
            avatar=avatar,
            user_type=user_type,
            user_verified=False,
            created_at=created_at,
            updated_at=created_at,
        )
        self.users[user_id] = user
        self.password_hashes[user_id] = password_hash
        self.refresh_tokens[user_id] = None
        return user

    def update_account_details(
        self,
        *,
        user_id: str,
        full_name: str,
        email: str,
        phone: str,
        updated_at: datetime,
    ) -> User | None:
        user = self.users.get(user_id)
        if user is None:
            return None
        updated = replace(user, full_name=full_name, email=email, phone=phone, updated_at=updated_at)
        self.users[user_id] = updated
        return updated

    def update_password_hash(
        self,
        *,
        user_id: str,
        password_hash: str,
        clear_refresh_token: bool,
        updated_at: datetime,
    ) -> None:
        self.password_hashes[user_id] = password_hash
        if clear_refresh_token:
            self.refresh_tokens[user_id] = None

    def set_refresh_token(self, *, user_id: str, refresh_token: str) -> None:
        self.refresh_tokens[user_id] = refresh_token

    def rotate_refresh_token(self, *, user_id: str, expected: str, replacement: str) -> bool:
        if user_id not in self.users or self.refresh_tokens.get(user_id) != expected:
            return False
        self.refresh_tokens[user_id] = replacement
        return True

    def clear_refresh_token(self, *, user_id: str) -> None:
        if user_id in self.users:
            self.refresh_tokens[user_id] = None

    def delete_user(self, *, user_id: str) -> bool:
        if user_id not in self.users:
            return False
        del self.users[user_id]
        self.password_hashes.pop(user_id, None)
        self.refresh_tokens.pop(user_id, None)
        return True


class FakePasswordHasher:
    def __init__(self):
        self.hash_calls = 0

    def hash(self, plain_password: str) -> str:
        self.hash_calls += 1
        return f"hashed::{plain_password}"

    def verify(self, plain_password: str, password_hash: str) -> bool:
        return password_hash == f"hashed::{plain_password}"

    def verify_and_update(self, plain_password: str, password_hash: str) -> tuple[bool, str | None]:
        return self.verify(plain_password, password_hash), None


@pytest.fixture
def accounts_port() -> FakeAccountsPort:
    return FakeAccountsPort()


@pytest.fixture
def password_hasher() -> FakePasswordHasher:
    return FakePasswordHasher()


@pytest.fixture
def token_service() -> JwtTokenService:
    return JwtTokenService(
        access_secret=ACCESS_SECRET,
        refresh_secret=REFRESH_SECRET,
        access_ttl_minutes=15,
        refresh_ttl_days=10,
    )
