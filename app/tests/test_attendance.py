"""
Tests for attendance punch in / punch out
"""


def test_check_before_punch_in(client, employee, headers_for):
    response = client.get("/api/v1/attendance/check-attendance", headers=headers_for(employee))
    assert response.status_code == 200
    assert response.json()["data"] is None


def test_punch_in_and_out(client, employee, headers_for):
    headers = headers_for(employee)

    response = client.post("/api/v1/attendance/punch-in", json={"in_note": "office"}, headers=headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user_id"] == employee.id
    assert data["clock_out"] is None

    response = client.post("/api/v1/attendance/punch-in", headers=headers)
    assert response.status_code == 422
    assert response.json()["message"] == "Attendance already exists"

    response = client.post("/api/v1/attendance/punch-out", json={"out_note": "done"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["clock_out"] is not None
    assert response.json()["data"]["out_note"] == "done"

    response = client.post("/api/v1/attendance/punch-out", headers=headers)
    assert response.status_code == 422

    response = client.get("/api/v1/attendance/check-attendance", headers=headers)
    assert response.json()["data"]["in_note"] == "office"


def test_punch_out_without_punch_in(client, employee, headers_for):
    response = client.post("/api/v1/attendance/punch-out", headers=headers_for(employee))
    assert response.status_code == 404
    assert response.json()["message"] == "Attendance not found for today"


def test_attendance_list_requires_capability(client, employee, admin, admin_headers, headers_for):
    client.post("/api/v1/attendance/punch-in", headers=headers_for(employee))
    client.post("/api/v1/attendance/punch-in", headers=admin_headers)

    assert client.get("/api/v1/attendance", headers=headers_for(employee)).status_code == 403

    response = client.get(f"/api/v1/attendance?user_id={employee.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["meta"]["total_rows"] == 1

    response = client.get("/api/v1/attendance?date_to=2000-01-01", headers=admin_headers)
    assert response.json()["data"]["meta"]["total_rows"] == 0


def test_punch_in_requires_authentication(client, db):
    assert client.post("/api/v1/attendance/punch-in").status_code == 401


def test_punches_write_audit_entries(client, db, employee, headers_for):
    from app.models.audit_log import AuditLog

    headers = headers_for(employee)
    client.post("/api/v1/attendance/punch-in", json={"in_note": "office"}, headers=headers)
    client.post("/api/v1/attendance/punch-out", headers=headers)
    client.post("/api/v1/attendance/punch-out", headers=headers)

    entries = (
        db.query(AuditLog)
        .filter(AuditLog.entity_type == "attendances")
        .order_by(AuditLog.id)
        .all()
    )
    assert [entry.action for entry in entries] == ["ATTENDANCE_PUNCH_IN", "ATTENDANCE_PUNCH_OUT"]
    assert all(entry.actor_id == employee.id for entry in entries)
    assert entries[0].meta_json["in_note"] == "office"
