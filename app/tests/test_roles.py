"""
Tests for role and permission endpoints
"""
from app.models.role import Permission


def _permission_ids(db, *codes):
    return [p.id for p in db.query(Permission).filter(Permission.code.in_(codes)).all()]


def test_permissions_are_seeded(client, admin_headers):
    response = client.get("/api/v1/permissions?limit=100", headers=admin_headers)
    assert response.status_code == 200
    codes = {row["code"] for row in response.json()["data"]["rows"]}
    assert {"roles.view", "leaves.decide", "holidays.create", "attendance.view"} <= codes


def test_permissions_limit_is_capped(client, admin_headers):
    response = client.get("/api/v1/permissions?limit=1000", headers=admin_headers)
    assert response.json()["data"]["meta"]["limit"] == 100


def test_create_role_with_permissions(client, db, admin_headers):
    response = client.post(
        "/api/v1/roles",
        json={
            "name": "Leave Manager",
            "description": "Handles leave",
            "permissions": _permission_ids(db, "leaves.view", "leaves.decide"),
        },
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Leave Manager"
    assert data["is_superuser"] is False
    assert [p["code"] for p in data["permissions"]] == ["leaves.decide", "leaves.view"]


def test_role_name_is_case_insensitive_unique(client, admin_headers, superuser_role):
    response = client.post("/api/v1/roles", json={"name": "super admin"}, headers=admin_headers)
    assert response.status_code == 422


def test_create_role_with_unknown_permission(client, admin_headers):
    response = client.post("/api/v1/roles", json={"name": "Broken", "permissions": [9999]}, headers=admin_headers)
    assert response.status_code == 422
    assert "permissions" in response.json()["errors"]


def test_update_replaces_permissions(client, db, admin_headers, role_factory):
    role = role_factory("Clerk", codes=["users.view", "users.create"])
    response = client.put(
        f"/api/v1/roles/{role.id}",
        json={"permissions": _permission_ids(db, "holidays.view")},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Clerk"
    assert [p["code"] for p in data["permissions"]] == ["holidays.view"]


def test_delete_role_in_use_refused(client, admin_headers, superuser_role):
    response = client.delete(f"/api/v1/roles/{superuser_role.id}", headers=admin_headers)
    assert response.status_code == 422
    assert "assigned to 1 user" in response.json()["message"]


def test_delete_unused_role(client, admin_headers, role_factory):
    role = role_factory("Temp", codes=["users.view"])
    assert client.delete(f"/api/v1/roles/{role.id}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/v1/roles/{role.id}", headers=admin_headers).status_code == 404


def test_granted_permission_takes_effect_on_next_request(client, db, role_factory, user_factory, headers_for):
    role = role_factory("Growing")
    user = user_factory("grow@example.com", roles=[role])
    headers = headers_for(user)
    assert client.get("/api/v1/holidays", headers=headers).status_code == 403

    role.permissions = db.query(Permission).filter(Permission.code == "holidays.view").all()
    db.commit()
    assert client.get("/api/v1/holidays", headers=headers).status_code == 200
