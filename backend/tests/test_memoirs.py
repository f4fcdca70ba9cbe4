def _create(client, headers, **overrides):
    body = {"satisfaction": "SATISFIED", "concentration": "HIGH", "achievement": "Shipped"}
    body.update(overrides)
    resp = client.post("/api/memoirs", headers=headers, json=body)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def test_create_and_fetch_memoir(client, auth_headers):
    created = _create(client, auth_headers, memo="  trimmed  ")
    assert created["memo"] == "trimmed"

    fetched = client.get(f"/api/memoirs/{created['id']}", headers=auth_headers)
    assert fetched.status_code == 200
    assert fetched.get_json()["achievement"] == "Shipped"


def test_create_requires_scores(client, auth_headers):
    resp = client.post("/api/memoirs", headers=auth_headers, json={"memo": "no scores"})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["code"] == "V002"
    assert set(body["details"]["fields"]) == {"satisfaction", "concentration"}


def test_update_memoir(client, auth_headers):
    created = _create(client, auth_headers)
    resp = client.patch(
        f"/api/memoirs/{created['id']}",
        headers=auth_headers,
        json={"concentration": "VERY_LOW", "improvement": "Sleep earlier"},
    )
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["concentration"] == "VERY_LOW"
    assert body["improvement"] == "Sleep earlier"
    assert body["satisfaction"] == "SATISFIED"


def test_update_rejects_null_score(client, auth_headers):
    created = _create(client, auth_headers)
    resp = client.patch(
        f"/api/memoirs/{created['id']}", headers=auth_headers, json={"satisfaction": None}
    )
    assert resp.status_code == 400


def test_delete_memoir(client, auth_headers):
    created = _create(client, auth_headers)
    assert client.delete(f"/api/memoirs/{created['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/memoirs/{created['id']}", headers=auth_headers).status_code == 404


def test_list_memoirs_pages_through_everything(client, auth_headers):
    ids = {_create(client, auth_headers)["id"] for _ in range(3)}

    first = client.get("/api/memoirs?size=2", headers=auth_headers).get_json()
    assert first["hasNext"] is True
    second = client.get(
        f"/api/memoirs?size=2&cursor={first['nextCursor']}", headers=auth_headers
    ).get_json()
    assert second["hasNext"] is False
    assert second["nextCursor"] is None

    listed = [item["id"] for item in first["content"] + second["content"]]
    assert set(listed) == ids
    assert listed == sorted(listed, reverse=True)


def test_memoirs_are_private(client, login_as):
    owner = login_as("owner@example.com")
    other = login_as("other@example.com")
    created = _create(client, owner)

    assert client.get(f"/api/memoirs/{created['id']}", headers=other).status_code == 404
    assert client.get("/api/memoirs", headers=other).get_json()["content"] == []
