"""
Tests for authentication endpoints
"""
from app.core.security import create_refresh_token, decode_token, hash_password, verify_password


def _login(client, email="admin@example.com", password="secret123"):
    return client.post("/api/v1/auth/login", json={"email": email, "password": password})


def test_login_success(client, admin):
    response = _login(client)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["token_type"] == "bearer"
    assert decode_token(data["access_token"])["type"] == "ACCESS"
    assert decode_token(data["refresh_token"])["type"] == "REFRESH"
    assert decode_token(data["access_token"])["sub"] == str(admin.id)


def test_login_wrong_password(client, admin):
    response = _login(client, password="wrong-password")
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"
    assert response.headers["www-authenticate"] == "Bearer"


def test_login_inactive_user(client, user_factory):
    user_factory("sleepy@example.com", is_active=False)
    assert _login(client, email="sleepy@example.com").status_code == 401


def test_me_reports_permissions(client, role_factory, user_factory, headers_for):
    user = user_factory("clerk@example.com", roles=[role_factory("Clerk", codes=["users.view", "leaves.view"])])
    response = client.get("/api/v1/auth/me", headers=headers_for(user))
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == "clerk@example.com"
    assert data["is_superuser"] is False
    assert data["permissions"] == ["leaves.view", "users.view"]


def test_me_for_superuser_lists_every_permission(client, admin, admin_headers):
    data = client.get("/api/v1/auth/me", headers=admin_headers).json()["data"]
    assert data["is_superuser"] is True
    assert "roles.delete" in data["permissions"]


def test_refresh_token_cannot_authenticate_requests(client, admin):
    headers = {"Authorization": f"Bearer {create_refresh_token(admin.id)}"}
    assert client.get("/api/v1/auth/me", headers=headers).status_code == 401


def test_refresh_rotates(client, admin):
    refresh_token = _login(client).json()["data"]["refresh_token"]

    response = client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
    assert response.status_code == 200
    new_pair = response.json()["data"]
    assert new_pair["refresh_token"] != refresh_token

    # the old refresh token was spent
    response = client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
    assert response.status_code == 401


def test_refresh_rejects_access_token(client, admin):
    access_token = _login(client).json()["data"]["access_token"]
    response = client.post("/api/v1/auth/refresh", json={"refresh_token": access_token})
    assert response.status_code == 401


def test_logout_revokes_tokens(client, admin):
    tokens = _login(client).json()["data"]
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    response = client.post("/api/v1/auth/logout", json={"refresh_token": tokens["refresh_token"]}, headers=headers)
    assert response.status_code == 200

    assert client.get("/api/v1/auth/me", headers=headers).status_code == 401
    assert client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]}).status_code == 401


def test_legacy_bcrypt_hash_still_verifies():
    import bcrypt

    legacy = bcrypt.hashpw(b"secret123", bcrypt.gensalt()).decode("utf-8")
    assert verify_password("secret123", legacy)
    assert not verify_password("other", legacy)
    assert verify_password("secret123", hash_password("secret123"))
    assert not verify_password("secret123", "")
