import pytest
from fastapi.testclient import TestClient

from storefront.config import SESSION_COOKIE_NAME
from tests.conftest import ADMIN_PASSWORD, ADMIN_USERNAME


def _login(client: TestClient, username: str, password: str):
    return client.post("/api/auth/login", json={"username": username, "password": password})


def test_login_with_configured_credentials_sets_session_cookie(client: TestClient, app):
    response = _login(client, ADMIN_USERNAME, ADMIN_PASSWORD)

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Login successful"}

    token = response.cookies[SESSION_COOKIE_NAME]
    decision = app.state.session_gate.authorize({SESSION_COOKIE_NAME: token})
    assert decision.allowed is True
    assert decision.identity.role == "admin"
    assert decision.identity.username == ADMIN_USERNAME


def test_login_cookie_flags(client: TestClient):
    response = _login(client, ADMIN_USERNAME, ADMIN_PASSWORD)

    set_cookie = response.headers["set-cookie"].lower()
    assert set_cookie.startswith(f"{SESSION_COOKIE_NAME}=")
    assert "httponly" in set_cookie
    assert "samesite=strict" in set_cookie
    assert "max-age=604800" in set_cookie
    assert "path=/" in set_cookie
    # Development settings: no Secure flag so the cookie works over http
    attributes = [part.strip() for part in set_cookie.split(";")[1:]]
    assert "secure" not in attributes


@pytest.mark.parametrize(
    "username,password",
    [
        (ADMIN_USERNAME, "wrong"),
        ("someone", ADMIN_PASSWORD),
        ("", ""),
        (ADMIN_USERNAME.upper(), ADMIN_PASSWORD),
        (ADMIN_USERNAME, ADMIN_PASSWORD + " "),
    ],
)
def test_login_with_other_credentials_is_401_without_cookie(client: TestClient, username, password):
    response = _login(client, username, password)

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid credentials"}
    assert "set-cookie" not in response.headers


def test_login_with_missing_fields_is_401(client: TestClient):
    response = client.post("/api/auth/login", json={})

    assert response.status_code == 401
    assert "set-cookie" not in response.headers


def test_logout_clears_cookie(admin_client: TestClient):
    response = admin_client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Logged out successfully"}
    set_cookie = response.headers["set-cookie"].lower()
    assert set_cookie.startswith(f"{SESSION_COOKIE_NAME}=")
    assert "max-age=0" in set_cookie


def test_logout_without_session_still_succeeds(client: TestClient):
    response = client.post("/api/auth/logout")

    assert response.status_code == 200


def test_session_status_for_logged_in_admin(admin_client: TestClient):
    response = admin_client.get("/api/auth/session")

    assert response.status_code == 200
    assert response.json() == {"authenticated": True, "username": ADMIN_USERNAME}


def test_session_status_without_cookie(client: TestClient):
    response = client.get("/api/auth/session")

    assert response.status_code == 401
    assert response.json() == {"authenticated": False, "reason": "no token"}


def test_login_then_mutate_then_logout_flow(client: TestClient):
    body = {"title": "Hemming", "description": "Trousers and skirts", "image": "/images/hem.jpg"}

    assert client.post("/api/services", json=body).status_code == 401

    assert _login(client, ADMIN_USERNAME, ADMIN_PASSWORD).status_code == 200
    assert client.post("/api/services", json=body).status_code == 201

    client.post("/api/auth/logout")
    client.cookies.clear()
    assert client.post("/api/services", json=body).status_code == 401
    assert len(client.get("/api/services").json()) == 1


def test_health(client: TestClient):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
