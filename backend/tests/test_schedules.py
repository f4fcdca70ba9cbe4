import pytest


def _schedule(**overrides):
    body = {
        "title": "Write report",
        "startAt": "2025-03-03T09:00:00",
        "endAt": "2025-03-03T11:00:00",
        "notifyMinutes": "MINUTES_30",
        "category": "WORK",
    }
    body.update(overrides)
    return body


def _create(client, headers, **overrides):
    resp = client.post("/api/schedules", headers=headers, json=_schedule(**overrides))
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def test_create_schedule_exposes_notify_time(client, auth_headers):
    created = _create(client, auth_headers)

    assert created["status"] == "PENDING"
    assert created["category"] == "WORK"
    assert created["notifyAt"] == "2025-03-03T08:30:00"


def test_notify_none_has_no_notify_time(client, auth_headers):
    created = _create(client, auth_headers, notifyMinutes="NONE")
    assert created["notifyAt"] is None


def test_create_defaults(client, auth_headers):
    resp = client.post(
        "/api/schedules",
        headers=auth_headers,
        json={"title": "Plain", "startAt": "2025-03-03T09:00:00", "endAt": "2025-03-03T09:15:00"},
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["category"] == "OTHER"
    assert body["notifyMinutes"] == "NONE"


def test_create_rejects_end_before_start(client, auth_headers):
    resp = client.post(
        "/api/schedules",
        headers=auth_headers,
        json=_schedule(endAt="2025-03-03T08:00:00"),
    )
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "V001"


@pytest.mark.parametrize("field, value", [("category", "PARTY"), ("notifyMinutes", "MINUTES_7")])
def test_create_rejects_unknown_enum_values(client, auth_headers, field, value):
    resp = client.post("/api/schedules", headers=auth_headers, json=_schedule(**{field: value}))
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "V001"


def test_create_rejects_unknown_fields(client, auth_headers):
    resp = client.post("/api/schedules", headers=auth_headers, json=_schedule(owner=3))
    assert resp.status_code == 400


def test_update_keeps_range_valid(client, auth_headers):
    created = _create(client, auth_headers)
    url = f"/api/schedules/{created['id']}"

    bad = client.patch(url, headers=auth_headers, json={"startAt": "2025-03-03T12:00:00"})
    assert bad.status_code == 400

    ok = client.patch(
        url, headers=auth_headers, json={"title": "Edited", "endAt": "2025-03-03T12:00:00"}
    )
    assert ok.status_code == 200
    assert ok.get_json()["title"] == "Edited"
    assert ok.get_json()["endAt"] == "2025-03-03T12:00:00"


def test_change_status(client, auth_headers):
    created = _create(client, auth_headers)
    resp = client.patch(
        f"/api/schedules/{created['id']}/status",
        headers=auth_headers,
        json={"status": "COMPLETED"},
    )
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "COMPLETED"


def test_delete_and_get_missing(client, auth_headers):
    created = _create(client, auth_headers)
    url = f"/api/schedules/{created['id']}"

    assert client.delete(url, headers=auth_headers).status_code == 200
    missing = client.get(url, headers=auth_headers)
    assert missing.status_code == 404
    assert missing.get_json()["code"] == "R001"


def test_other_users_schedule_is_not_found(client, login_as):
    owner = login_as("owner@example.com")
    other = login_as("other@example.com")
    created = _create(client, owner)

    resp = client.patch(
        f"/api/schedules/{created['id']}", headers=other, json={"title": "Hijack"}
    )
    assert resp.status_code == 404


def test_list_filters(client, auth_headers):
    _create(client, auth_headers, startAt="2025-03-01T09:00:00", endAt="2025-03-01T10:00:00")
    _create(
        client,
        auth_headers,
        startAt="2025-03-02T09:00:00",
        endAt="2025-03-02T10:00:00",
        category="HEALTH",
    )
    third = _create(
        client, auth_headers, startAt="2025-03-03T09:00:00", endAt="2025-03-03T10:00:00"
    )
    client.patch(
        f"/api/schedules/{third['id']}/status", headers=auth_headers, json={"status": "COMPLETED"}
    )

    everything = client.get("/api/schedules", headers=auth_headers).get_json()
    assert [item["startAt"][:10] for item in everything["content"]] == [
        "2025-03-03",
        "2025-03-02",
        "2025-03-01",
    ]

    ranged = client.get(
        "/api/schedules?from=2025-03-02T00:00:00&to=2025-03-03T00:00:00", headers=auth_headers
    ).get_json()
    assert [item["startAt"][:10] for item in ranged["content"]] == ["2025-03-02"]

    health = client.get("/api/schedules?category=health", headers=auth_headers).get_json()
    assert [item["category"] for item in health["content"]] == ["HEALTH"]

    done = client.get("/api/schedules?status=COMPLETED", headers=auth_headers).get_json()
    assert [item["id"] for item in done["content"]] == [third["id"]]


def test_list_rejects_unknown_status_filter(client, auth_headers):
    resp = client.get("/api/schedules?status=SOMEDAY", headers=auth_headers)
    assert resp.status_code == 400
    assert resp.get_json()["details"] == {"field": "status"}
