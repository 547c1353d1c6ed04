"""
Tests for holiday calendar endpoints
"""


def _create(client, headers, date, title="Holiday", description="Office closed"):
    return client.post(
        "/api/v1/holidays",
        json={"title": title, "description": description, "date": date},
        headers=headers,
    )


def test_create_and_get_holiday(client, admin_headers):
    response = _create(client, admin_headers, "2025-12-25", title="Christmas")
    assert response.status_code == 200
    holiday = response.json()["data"]
    assert holiday["status"] is True

    response = client.get(f"/api/v1/holidays/{holiday['id']}", headers=admin_headers)
    assert response.json()["data"]["title"] == "Christmas"


def test_duplicate_active_date_rejected(client, admin_headers):
    _create(client, admin_headers, "2025-01-26")
    response = _create(client, admin_headers, "2025-01-26", title="Other")
    assert response.status_code == 422
    assert response.json()["message"] == "Date already exists"


def test_soft_delete_frees_the_date(client, admin_headers):
    holiday_id = _create(client, admin_headers, "2025-08-15").json()["data"]["id"]

    response = client.delete(f"/api/v1/holidays/{holiday_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["status"] is False

    assert client.get(f"/api/v1/holidays/{holiday_id}", headers=admin_headers).status_code == 404
    assert _create(client, admin_headers, "2025-08-15").status_code == 200


def test_list_search_and_order(client, admin_headers):
    _create(client, admin_headers, "2025-01-01", title="New Year")
    _create(client, admin_headers, "2025-10-02", title="Gandhi Jayanti", description="National holiday")
    _create(client, admin_headers, "2025-11-01", title="Founders day", description="Company NATIONAL pride")

    response = client.get("/api/v1/holidays", headers=admin_headers)
    rows = response.json()["data"]["rows"]
    assert [r["date"] for r in rows] == ["2025-11-01", "2025-10-02", "2025-01-01"]

    response = client.get("/api/v1/holidays?search=national", headers=admin_headers)
    assert response.json()["data"]["meta"]["total_rows"] == 2


def test_update_holiday(client, admin_headers):
    first = _create(client, admin_headers, "2025-03-01").json()["data"]["id"]
    _create(client, admin_headers, "2025-03-02")

    response = client.put(f"/api/v1/holidays/{first}", json={"title": "Renamed"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["title"] == "Renamed"
    assert response.json()["data"]["date"] == "2025-03-01"

    response = client.put(f"/api/v1/holidays/{first}", json={"date": "2025-03-02"}, headers=admin_headers)
    assert response.status_code == 422
