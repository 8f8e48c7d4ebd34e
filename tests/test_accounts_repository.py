from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from app.domain.exceptions import ConflictError
from app.infrastructure.db.engine import create_schema
from app.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository


@pytest.fixture
def repository() -> SqlAccountsRepository:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_schema(engine)
    return SqlAccountsRepository(engine)


def _create(repository, user_id="user-1", username="alice", email="alice@x.com", phone="5550100"):
    return repository.create_user(
        user_id=user_id,
        username=username,
        email=email,
        full_name="Alice Liddell",
        phone=phone,
        avatar="",
        user_type="user",
        fcm_token="",
        password_hash="$2b$10$hash",
        created_at=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    )


def test_create_and_read_user(repository):
    created = _create(repository)

    assert created.id == "user-1"
    assert created.user_verified is False
    assert created.created_at == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert repository.get_user_by_email(email="ALICE@x.com").id == "user-1"
    assert repository.get_user_by_username(username="Alice").id == "user-1"
    assert repository.get_user_by_id(user_id="missing") is None

    credentials = repository.get_credentials(user_id="user-1")
    assert credentials.password_hash == "$2b$10$hash"
    assert credentials.refresh_token is None


def test_duplicate_email_or_username_is_conflict(repository):
    _create(repository)

    with pytest.raises(ConflictError):
        _create(repository, user_id="user-2", username="other")
    with pytest.raises(ConflictError):
        _create(repository, user_id="user-3", email="other@x.com")


def test_find_user_by_email_or_phone(repository):
    _create(repository)

    assert repository.find_user_by_email_or_phone(email="alice@x.com", phone=None).id == "user-1"
    assert repository.find_user_by_email_or_phone(email=None, phone="5550100").id == "user-1"
    assert repository.find_user_by_email_or_phone(email=None, phone=None) is None
    assert repository.find_user_by_email_or_phone(email="bob@x.com", phone=None) is None


def test_rotate_refresh_token_is_compare_and_swap(repository):
    _create(repository)
    repository.set_refresh_token(user_id="user-1", refresh_token="r1")

    assert repository.rotate_refresh_token(user_id="user-1", expected="r1", replacement="r2") is True
    # Second attempt with the same token loses the race.
    assert repository.rotate_refresh_token(user_id="user-1", expected="r1", replacement="r3") is False
    assert repository.get_credentials(user_id="user-1").refresh_token == "r2"


def test_rotate_fails_after_clear(repository):
    _create(repository)
    repository.set_refresh_token(user_id="user-1", refresh_token="r1")

    repository.clear_refresh_token(user_id="user-1")

    assert repository.get_credentials(user_id="user-1").refresh_token is None
    assert repository.rotate_refresh_token(user_id="user-1", expected="r1", replacement="r2") is False


def test_update_password_hash_optionally_clears_refresh_token(repository):
    _create(repository)
    repository.set_refresh_token(user_id="user-1", refresh_token="r1")
    now = datetime.now(timezone.utc)

    repository.update_password_hash(user_id="user-1", password_hash="h2", clear_refresh_token=False, updated_at=now)
    assert repository.get_credentials(user_id="user-1").refresh_token == "r1"

    repository.update_password_hash(user_id="user-1", password_hash="h3", clear_refresh_token=True, updated_at=now)
    credentials = repository.get_credentials(user_id="user-1")
    assert credentials.password_hash == "h3"
    assert credentials.refresh_token is None


def test_update_account_details(repository):
    _create(repository)
    _create(repository, user_id="user-2", username="bob", email="bob@x.com")
    now = datetime.now(timezone.utc)

    updated = repository.update_account_details(
        user_id="user-1",
        full_name="Alice L.",
        email="alice@new.com",
        phone="5550199",
        updated_at=now,
    )
    assert updated.email == "alice@new.com"
    assert updated.full_name == "Alice L."

    assert repository.update_account_details(
        user_id="missing", full_name="x", email="x@x.com", phone="1", updated_at=now
    ) is None
    with pytest.raises(ConflictError):
        repository.update_account_details(
            user_id="user-1", full_name="x", email="bob@x.com", phone="1", updated_at=now
        )


def test_delete_user(repository):
    _create(repository)

    assert repository.delete_user(user_id="user-1") is True
    assert repository.delete_user(user_id="user-1") is False
    assert repository.get_user_by_id(user_id="user-1") is None
