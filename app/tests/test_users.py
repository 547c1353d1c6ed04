"""
Tests for user endpoints
"""
from app.models.user import User


def _payload(role_ids, email="new@example.com", **overrides):
    payload = {
        "first_name": "New",
        "last_name": "Hire",
        "phone": "9123456780",
        "email": email,
        "password": "secret123",
        "roles": role_ids,
    }
    payload.update(overrides)
    return payload


def test_create_user(client, db, admin_headers, role_factory):
    role = role_factory("Staff")
    response = client.post("/api/v1/users", json=_payload([role.id]), headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == "new@example.com"
    assert data["roles"] == [{"id": role.id, "name": "Staff"}]
    assert "password_hash" not in data

    user = db.query(User).filter(User.email == "new@example.com").one()
    assert user.password_hash.startswith("$argon2")


def test_create_user_validation(client, admin_headers, role_factory, admin):
    role = role_factory("Staff")

    response = client.post("/api/v1/users", json=_payload([]), headers=admin_headers)
    assert response.status_code == 422
    assert "roles" in response.json()["errors"]

    response = client.post("/api/v1/users", json=_payload([role.id], phone="12345"), headers=admin_headers)
    assert "phone" in response.json()["errors"]

    response = client.post("/api/v1/users", json=_payload([role.id], password="123"), headers=admin_headers)
    assert response.json()["errors"]["password"] == ["Password must be at least 6 characters"]

    response = client.post("/api/v1/users", json=_payload([role.id], email=admin.email), headers=admin_headers)
    assert response.status_code == 422
    assert "email" in response.json()["errors"]

    response = client.post("/api/v1/users", json=_payload([4242]), headers=admin_headers)
    assert response.status_code == 422
    assert "roles" in response.json()["errors"]


def test_list_excludes_caller(client, admin, employee, admin_headers):
    response = client.get("/api/v1/users", headers=admin_headers)
    assert response.status_code == 200
    emails = [row["email"] for row in response.json()["data"]["rows"]]
    assert emails == ["employee@example.com"]


def test_update_user_roles_and_password(client, db, employee, admin_headers, role_factory):
    role = role_factory("Staff")
    old_hash = employee.password_hash

    response = client.put(
        f"/api/v1/users/{employee.id}",
        json={"first_name": "Evelyn", "roles": [role.id], "password": "  "},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["first_name"] == "Evelyn"
    assert [r["name"] for r in data["roles"]] == ["Staff"]

    db.expire_all()
    assert db.get(User, employee.id).password_hash == old_hash


def test_soft_delete_user(client, db, employee, admin_headers, headers_for):
    response = client.delete(f"/api/v1/users/{employee.id}", headers=admin_headers)
    assert response.status_code == 200

    db.expire_all()
    user = db.get(User, employee.id)
    assert user is not None
    assert user.deleted_at is not None
    assert client.get(f"/api/v1/users/{employee.id}", headers=admin_headers).status_code == 404
    # a deleted account can no longer authenticate
    assert client.get("/api/v1/auth/me", headers=headers_for(employee)).status_code == 401


def test_cannot_delete_self(client, admin, admin_headers):
    assert client.delete(f"/api/v1/users/{admin.id}", headers=admin_headers).status_code == 422
