"""
Tests for leave type and leave policy endpoints
"""
from datetime import date

from app.models.leave import Leave, LeaveStatus


def test_leave_type_crud(client, admin_headers):
    response = client.post(
        "/api/v1/leave-types",
        json={"name": "Casual", "is_paid": True, "description": "Casual leave"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    type_id = response.json()["data"]["id"]

    response = client.post("/api/v1/leave-types", json={"name": "casual", "is_paid": False}, headers=admin_headers)
    assert response.status_code == 422
    assert "name" in response.json()["errors"]

    response = client.put(
        f"/api/v1/leave-types/{type_id}",
        json={"name": "Casual Leave", "is_paid": False},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["is_paid"] is False

    assert client.delete(f"/api/v1/leave-types/{type_id}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/v1/leave-types/{type_id}", headers=admin_headers).status_code == 404


def test_leave_type_in_use_cannot_be_deleted(client, sick_policy, admin_headers):
    response = client.delete(f"/api/v1/leave-types/{sick_policy.leave_type_id}", headers=admin_headers)
    assert response.status_code == 422


def test_policy_defaults_remaining_to_total(client, employee, sick_leave, admin_headers):
    response = client.post(
        "/api/v1/leave-policies",
        json={"user_id": employee.id, "leave_type_id": sick_leave.id, "policy_name": "Sick", "total_days": 12},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total_days"] == 12
    assert data["remaining_days"] == 12
    assert data["user"]["email"] == "employee@example.com"
    assert data["leave_type"]["name"] == "Sick"


def test_duplicate_policy_rejected(client, sick_policy, admin_headers):
    response = client.post(
        "/api/v1/leave-policies",
        json={"user_id": sick_policy.user_id, "leave_type_id": sick_policy.leave_type_id, "total_days": 5},
        headers=admin_headers,
    )
    assert response.status_code == 422
    assert response.json()["message"] == "Policy already exists for this user and leave type"


def test_policy_remaining_cannot_exceed_total(client, employee, sick_leave, admin_headers):
    response = client.post(
        "/api/v1/leave-policies",
        json={"user_id": employee.id, "leave_type_id": sick_leave.id, "total_days": 5, "remaining_days": 6},
        headers=admin_headers,
    )
    assert response.status_code == 422
    assert response.json()["message"] == "Validation errors"


def test_policy_negative_total_rejected(client, employee, sick_leave, admin_headers):
    response = client.post(
        "/api/v1/leave-policies",
        json={"user_id": employee.id, "leave_type_id": sick_leave.id, "total_days": -1},
        headers=admin_headers,
    )
    assert response.status_code == 422
    assert "total_days" in response.json()["errors"]


def test_policy_update_resets_remaining_when_omitted(client, db, sick_policy, admin_headers):
    sick_policy.remaining_days = 3
    db.commit()

    response = client.put(
        f"/api/v1/leave-policies/{sick_policy.id}",
        json={"user_id": sick_policy.user_id, "leave_type_id": sick_policy.leave_type_id, "total_days": 15},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["remaining_days"] == 15


def test_policy_list_filters_by_user(client, db, sick_policy, admin, admin_headers):
    response = client.get(f"/api/v1/leave-policies?user_id={sick_policy.user_id}", headers=admin_headers)
    assert response.json()["data"]["meta"]["total_rows"] == 1

    response = client.get(f"/api/v1/leave-policies?user_id={admin.id}", headers=admin_headers)
    assert response.json()["data"]["meta"]["total_rows"] == 0


def test_policy_delete(client, sick_policy, admin_headers):
    response = client.delete(f"/api/v1/leave-policies/{sick_policy.id}", headers=admin_headers)
    assert response.status_code == 200
    assert client.get(f"/api/v1/leave-policies/{sick_policy.id}", headers=admin_headers).status_code == 404


def test_leave_type_with_leaves_cannot_be_deleted(client, db, employee, sick_leave, admin_headers):
    db.add(
        Leave(
            user_id=employee.id,
            leave_type_id=sick_leave.id,
            from_date=date(2025, 1, 1),
            to_date=date(2025, 1, 1),
            total_days=1,
            status=LeaveStatus.REJECTED,
        )
    )
    db.commit()
    assert client.delete(f"/api/v1/leave-types/{sick_leave.id}", headers=admin_headers).status_code == 422
