from __future__ import annotations

from app.infrastructure.security.password_hasher import PasswordHasher


def _hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


def test_hash_is_not_plaintext_and_verifies():
    hasher = _hasher()

    password_hash = hasher.hash("secret123")

    assert password_hash != "secret123"
    assert password_hash.startswith("$2")
    assert hasher.verify("secret123", password_hash) is True


def test_verify_rejects_other_password():
    hasher = _hasher()
    password_hash = hasher.hash("secret123")

    assert hasher.verify("secret124", password_hash) is False
    assert hasher.verify("", password_hash) is False


def test_hash_is_salted():
    hasher = _hasher()

    assert hasher.hash("secret123") != hasher.hash("secret123")


def test_verify_returns_false_on_malformed_hash():
    hasher = _hasher()

    assert hasher.verify("secret123", "not-a-hash") is False
    assert hasher.verify_and_update("secret123", "not-a-hash") == (False, None)


def test_verify_and_update_accepts_current_hash_without_replacement():
    hasher = _hasher()
    password_hash = hasher.hash("secret123")

    verified, replacement = hasher.verify_and_update("secret123", password_hash)

    assert verified is True
    assert replacement is None
