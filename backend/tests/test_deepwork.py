from datetime import datetime, timedelta

import pytest

from app import app
from models import DeepWorkSession
from pagination import Cursor
from repositories import deepwork_repo, users_repo
from security import BusinessError, ValidationError
from services import deepwork_service


def _start(client, headers, start_time):
    return client.post(
        "/api/deep-work/sessions", headers=headers, json={"startTime": start_time}
    )


def test_start_and_end_session(client, auth_headers):
    started = _start(client, auth_headers, "2025-03-03T09:00:00")
    assert started.status_code == 201
    session = started.get_json()
    assert session["endTime"] is None
    assert session["durationMinutes"] is None

    ended = client.patch(
        f"/api/deep-work/sessions/{session['id']}/end",
        headers=auth_headers,
        json={"endTime": "2025-03-03T10:30:45"},
    )
    assert ended.status_code == 200
    assert ended.get_json()["durationMinutes"] == 90


def test_start_without_body_uses_now(client, auth_headers):
    resp = client.post("/api/deep-work/sessions", headers=auth_headers)
    assert resp.status_code == 201
    assert resp.get_json()["startTime"] is not None


def test_only_one_open_session(client, auth_headers):
    assert _start(client, auth_headers, "2025-03-03T09:00:00").status_code == 201

    second = _start(client, auth_headers, "2025-03-03T09:05:00")
    assert second.status_code == 409
    assert second.get_json()["code"] == "R002"


def test_ending_twice_is_invalid(client, auth_headers):
    session_id = _start(client, auth_headers, "2025-03-03T09:00:00").get_json()["id"]
    url = f"/api/deep-work/sessions/{session_id}/end"
    body = {"endTime": "2025-03-03T09:30:00"}

    assert client.patch(url, headers=auth_headers, json=body).status_code == 200
    again = client.patch(url, headers=auth_headers, json=body)
    assert again.status_code == 400
    assert again.get_json()["code"] == "V001"


def test_end_before_start_is_invalid(client, auth_headers):
    session_id = _start(client, auth_headers, "2025-03-03T09:00:00").get_json()["id"]
    resp = client.patch(
        f"/api/deep-work/sessions/{session_id}/end",
        headers=auth_headers,
        json={"endTime": "2025-03-03T08:00:00"},
    )
    assert resp.status_code == 400


def test_record_distractions(client, auth_headers):
    session_id = _start(client, auth_headers, "2025-03-03T09:00:00").get_json()["id"]
    url = f"/api/deep-work/sessions/{session_id}/distractions"

    client.post(url, headers=auth_headers, json={"overridden": False})
    resp = client.post(url, headers=auth_headers, json={"overridden": True})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["distractionCount"] == 2
    assert body["distractionOverrideCount"] == 1


def test_sessions_are_scoped_to_owner(client, login_as):
    owner = login_as("owner@example.com")
    intruder = login_as("intruder@example.com")
    session_id = _start(client, owner, "2025-03-03T09:00:00").get_json()["id"]

    for method, url in (
        ("get", f"/api/deep-work/sessions/{session_id}"),
        ("delete", f"/api/deep-work/sessions/{session_id}"),
        ("patch", f"/api/deep-work/sessions/{session_id}/end"),
    ):
        resp = getattr(client, method)(url, headers=intruder, json={})
        assert resp.status_code == 404
        assert resp.get_json()["code"] == "R001"

    assert client.get(f"/api/deep-work/sessions/{session_id}", headers=owner).status_code == 200


def test_list_sessions_paginates_newest_first(client, auth_headers):
    base = datetime(2025, 3, 1, 9, 0)
    for day in range(5):
        start = base + timedelta(days=day)
        session_id = _start(client, auth_headers, start.isoformat()).get_json()["id"]
        client.patch(
            f"/api/deep-work/sessions/{session_id}/end",
            headers=auth_headers,
            json={"endTime": (start + timedelta(minutes=30)).isoformat()},
        )

    first = client.get("/api/deep-work/sessions?size=2", headers=auth_headers).get_json()
    assert first["size"] == 2
    assert first["hasNext"] is True
    assert [item["startTime"] for item in first["content"]] == [
        "2025-03-05T09:00:00",
        "2025-03-04T09:00:00",
    ]

    seen = [item["id"] for item in first["content"]]
    cursor = first["nextCursor"]
    while cursor:
        page = client.get(
            f"/api/deep-work/sessions?size=2&cursor={cursor}", headers=auth_headers
        ).get_json()
        seen.extend(item["id"] for item in page["content"])
        cursor = page["nextCursor"]

    assert len(seen) == 5
    assert len(set(seen)) == 5


def test_malformed_cursor_restarts_from_first_page(client, auth_headers):
    _start(client, auth_headers, "2025-03-03T09:00:00")
    resp = client.get("/api/deep-work/sessions?cursor=bm90LWEtY3Vyc29y", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["size"] == 1


@pytest.mark.usefixtures("app_ctx")
def test_keyset_breaks_timestamp_ties_by_id():
    user = users_repo.create_user("tie@example.com", "hash", "Tie")
    same_start = datetime(2025, 3, 3, 9, 0)
    for _ in range(3):
        row = deepwork_repo.create_session(user.id, same_start)
        deepwork_repo.end_session(row.id, user.id, same_start + timedelta(minutes=5))

    rows = deepwork_repo.list_sessions(user.id, None, 10)
    ids = [row.id for row in rows]
    assert ids == sorted(ids, reverse=True)

    after_first = deepwork_repo.list_sessions(user.id, Cursor(ids[0], same_start), 10)
    assert [row.id for row in after_first] == ids[1:]


@pytest.mark.usefixtures("app_ctx")
def test_completed_between_ignores_open_sessions():
    user = users_repo.create_user("range@example.com", "hash", "Range")
    closed = deepwork_repo.create_session(user.id, datetime(2025, 3, 3, 9, 0))
    deepwork_repo.end_session(closed.id, user.id, datetime(2025, 3, 3, 9, 45))
    deepwork_repo.create_session(user.id, datetime(2025, 3, 3, 11, 0))

    rows = deepwork_repo.list_completed_between(
        user.id, datetime(2025, 3, 3), datetime(2025, 3, 4)
    )
    assert [row.id for row in rows] == [closed.id]
    assert isinstance(rows[0], DeepWorkSession)


def test_service_maps_repository_conflicts(monkeypatch):
    def fake_create(user_id, start_time):
        raise deepwork_repo.ConflictError("already running")

    def fake_end(session_id, user_id, end_time):
        raise deepwork_repo.ConflictError("already ended")

    def fake_get(session_id, user_id):
        return DeepWorkSession(id=session_id, user_id=user_id, start_time=datetime(2025, 1, 1))

    monkeypatch.setattr(deepwork_repo, "create_session", fake_create)
    monkeypatch.setattr(deepwork_repo, "end_session", fake_end)
    monkeypatch.setattr(deepwork_repo, "get_session", fake_get)

    with app.app_context():
        with pytest.raises(BusinessError) as excinfo:
            deepwork_service.start_session(1, {})
        assert excinfo.value.status == 409

        with pytest.raises(ValidationError) as excinfo:
            deepwork_service.end_session(1, 7, {"endTime": "2025-01-01T01:00:00"})
        assert excinfo.value.status == 400
