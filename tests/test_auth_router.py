from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_accounts_repository, get_password_hasher, get_token_service
from app.main import app


BASE = "/api/v1/users"

ALICE = {
    "username": "alice",
    "email": "alice@x.com",
    "fullName": "Alice Liddell",
    "password": "secret123",
    "phone": "5550100",
}


@pytest.fixture
def client(accounts_port, password_hasher, token_service):
    app.dependency_overrides[get_accounts_repository] = lambda: accounts_port
    app.dependency_overrides[get_password_hasher] = lambda: password_hasher
    app.dependency_overrides[get_token_service] = lambda: token_service
    # Cookies are issued with the secure flag, so talk https.
    yield TestClient(app, base_url="https://testserver")
    app.dependency_overrides.clear()


def _register_and_login(client) -> dict:
    assert client.post(f"{BASE}/register", json=ALICE).status_code == 201
    response = client.post(f"{BASE}/login", json={"email": "alice@x.com", "password": "secret123"})
    assert response.status_code == 200
    return response.json()["data"]


def test_register_returns_sanitized_user_in_envelope(client):
    response = client.post(f"{BASE}/register", json=ALICE)

    assert response.status_code == 201
    payload = response.json()
    assert payload["statusCode"] == 201
    assert payload["success"] is True
    assert payload["message"] == "User created successfully"
    assert payload["data"]["username"] == "alice"
    assert payload["data"]["fullName"] == "Alice Liddell"
    assert payload["data"]["userType"] == "user"
    assert "password" not in payload["data"]
    assert "passwordHash" not in payload["data"]
    assert "refreshToken" not in payload["data"]


def test_register_duplicate_is_conflict(client):
    client.post(f"{BASE}/register", json=ALICE)

    response = client.post(f"{BASE}/register", json={**ALICE, "username": "alice2"})

    assert response.status_code == 409
    assert response.json() == {
        "statusCode": 409,
        "message": "Email or username already used.",
        "success": False,
        "errors": [],
    }


def test_login_sets_cookies_and_returns_tokens(client, token_service):
    data = _register_and_login(client)

    assert set(data) == {"user", "accessToken", "refreshToken"}
    assert token_service.decode_access_token(token=data["accessToken"]).user_id == data["user"]["id"]
    assert client.cookies.get("accessToken") == data["accessToken"]
    assert client.cookies.get("refreshToken") == data["refreshToken"]


def test_login_cookies_are_http_only_and_secure(client):
    client.post(f"{BASE}/register", json=ALICE)

    response = client.post(f"{BASE}/login", json={"email": "alice@x.com", "password": "secret123"})

    set_cookies = response.headers.get_list("set-cookie")
    assert len(set_cookies) == 2
    for header in set_cookies:
        lowered = header.lower()
        assert "httponly" in lowered
        assert "secure" in lowered


def test_login_unknown_email_is_404_and_wrong_password_is_401(client):
    client.post(f"{BASE}/register", json=ALICE)

    missing = client.post(f"{BASE}/login", json={"email": "bob@x.com", "password": "secret123"})
    wrong = client.post(f"{BASE}/login", json={"email": "alice@x.com", "password": "nope-nope"})

    assert missing.status_code == 404
    assert missing.json()["success"] is False
    assert wrong.status_code == 401
    assert wrong.json()["message"] == "Password incorrect."


def test_login_without_email_or_phone_is_400(client):
    response = client.post(f"{BASE}/login", json={"password": "secret123"})

    assert response.status_code == 400
    assert response.json()["message"] == "Email or phone is required."


def test_malformed_body_uses_error_envelope(client):
    response = client.post(f"{BASE}/login", json={"email": "alice@x.com"})

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["errors"][0]["field"] == "password"


def test_refresh_scenario_old_token_is_rejected_after_rotation(client):
    t1 = _register_and_login(client)
    client.cookies.clear()

    first = client.post(f"{BASE}/refresh-token", json={"refreshToken": t1["refreshToken"]})
    assert first.status_code == 200
    t2 = first.json()["data"]
    assert set(t2) == {"accessToken", "refreshToken"}
    assert t2["refreshToken"] != t1["refreshToken"]

    client.cookies.clear()
    replay = client.post(f"{BASE}/refresh-token", json={"refreshToken": t1["refreshToken"]})
    assert replay.status_code == 401
    assert replay.json()["message"] == "Refresh token is expired or already used."

    client.cookies.clear()
    assert client.post(f"{BASE}/refresh-token", json={"refreshToken": t2["refreshToken"]}).status_code == 200


def test_refresh_reads_cookie(client):
    t1 = _register_and_login(client)

    response = client.post(f"{BASE}/refresh-token")

    assert response.status_code == 200
    assert response.json()["data"]["refreshToken"] != t1["refreshToken"]
    assert client.cookies.get("refreshToken") == response.json()["data"]["refreshToken"]


def test_refresh_without_token_is_401(client):
    response = client.post(f"{BASE}/refresh-token")

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized request."


def test_refresh_with_garbage_token_is_401(client):
    response = client.post(f"{BASE}/refresh-token", json={"refreshToken": "not-a-token"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid refresh token."


def test_logout_clears_session_and_cookies(client):
    tokens = _register_and_login(client)

    response = client.post(f"{BASE}/logout")

    assert response.status_code == 200
    assert response.json()["data"] == {}
    assert client.cookies.get("accessToken") is None
    assert client.cookies.get("refreshToken") is None

    retry = client.post(f"{BASE}/refresh-token", json={"refreshToken": tokens["refreshToken"]})
    assert retry.status_code == 401


def test_logout_requires_authentication(client):
    response = client.post(f"{BASE}/logout")

    assert response.status_code == 401
    assert response.json()["success"] is False


def test_me_accepts_bearer_header(client):
    tokens = _register_and_login(client)
    client.cookies.clear()

    response = client.get(f"{BASE}/me", headers={"Authorization": f"Bearer {tokens['accessToken']}"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == tokens["user"]["id"]
    assert "passwordHash" not in data
    assert "refreshToken" not in data


def test_me_rejects_refresh_token_as_access_token(client):
    tokens = _register_and_login(client)
    client.cookies.clear()

    response = client.get(f"{BASE}/me", headers={"Authorization": f"Bearer {tokens['refreshToken']}"})

    assert response.status_code == 401


def test_change_password(client, accounts_port):
    tokens = _register_and_login(client)
    user_id = tokens["user"]["id"]

    wrong = client.patch(
        f"{BASE}/change-password",
        json={"oldPassword": "wrong-one", "newPassword": "newsecret1"},
    )
    assert wrong.status_code == 401
    assert accounts_port.password_hashes[user_id] == "hashed::secret123"

    ok = client.patch(
        f"{BASE}/change-password",
        json={"oldPassword": "secret123", "newPassword": "newsecret1"},
    )
    assert ok.status_code == 200
    assert ok.json()["data"] == {}

    relogin = client.post(f"{BASE}/login", json={"email": "alice@x.com", "password": "newsecret1"})
    assert relogin.status_code == 200
