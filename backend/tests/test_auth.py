import jwt
import pytest
from werkzeug.security import generate_password_hash

from app import app
from controllers.helpers import get_token_provider
from enums import ErrorCode
from infra.token_provider import TokenProvider
from repositories import users_repo
from security import BusinessError
from services import auth_service


def test_signup_and_login_flow(client):
    signup = client.post(
        "/api/auth/signup",
        json={"email": "  Ada@Example.com ", "password": "StrongPass123", "name": "Ada"},
    )
    assert signup.status_code == 201
    user = signup.get_json()
    assert user["email"] == "ada@example.com"
    assert user["role"] == "ROLE_USER"
    assert "password" not in user and "passwordHash" not in user

    login = client.post(
        "/api/auth/login", json={"email": "ada@example.com", "password": "StrongPass123"}
    )
    assert login.status_code == 200
    payload = login.get_json()
    assert set(payload) == {"accessToken", "tokenType", "expiresIn"}
    assert payload["tokenType"] == "Bearer"
    assert payload["expiresIn"] == app.config["JWT_EXP_SECONDS"]

    claims = jwt.decode(
        payload["accessToken"], app.config["JWT_SECRET"], algorithms=["HS256"]
    )
    assert claims["sub"] == "ada@example.com"
    assert claims["authorities"] == ["ROLE_USER"]

    me = client.get(
        "/api/users/me", headers={"Authorization": f"Bearer {payload['accessToken']}"}
    )
    assert me.status_code == 200
    assert me.get_json()["name"] == "Ada"


def test_signup_duplicate_email(client):
    body = {"email": "dup@example.com", "password": "StrongPass123", "name": "Dup"}
    assert client.post("/api/auth/signup", json=body).status_code == 201

    again = client.post("/api/auth/signup", json={**body, "email": "DUP@example.com"})
    assert again.status_code == 409
    assert again.get_json()["code"] == "U002"


def test_signup_missing_fields(client):
    resp = client.post("/api/auth/signup", json={"email": "x@example.com"})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["code"] == "V002"
    assert set(body["details"]["fields"]) == {"password", "name"}


def test_signup_rejects_short_password(client):
    resp = client.post(
        "/api/auth/signup", json={"email": "x@example.com", "password": "short", "name": "X"}
    )
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "V001"


def test_signup_rejects_non_json_body(client):
    resp = client.post("/api/auth/signup", data="not json", content_type="text/plain")
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "V001"


def test_login_failures_share_code(client, login_as):
    login_as("known@example.com")

    wrong_password = client.post(
        "/api/auth/login", json={"email": "known@example.com", "password": "nope-nope"}
    )
    unknown_email = client.post(
        "/api/auth/login", json={"email": "ghost@example.com", "password": "nope-nope"}
    )

    for resp in (wrong_password, unknown_email):
        assert resp.status_code == 401
        assert resp.get_json()["code"] == "A005"
    assert wrong_password.get_json()["message"] == unknown_email.get_json()["message"]


@pytest.mark.usefixtures("app_ctx")
def test_login_service_issues_token_for_email_subject():
    users_repo.create_user("alice@example.com", generate_password_hash("hunter2"), "Alice")
    provider = get_token_provider()

    payload, status = auth_service.login(
        {"email": "alice@example.com", "password": "hunter2"}, token_provider=provider
    )

    assert status == 200
    assert provider.extract_subject(payload["accessToken"]) == "alice@example.com"


@pytest.mark.usefixtures("app_ctx")
@pytest.mark.parametrize(
    "email, password",
    [("alice@example.com", "wrong"), ("nobody@example.com", "hunter2")],
)
def test_login_service_rejects_bad_credentials(email, password):
    users_repo.create_user("alice@example.com", generate_password_hash("hunter2"), "Alice")

    with pytest.raises(BusinessError) as excinfo:
        auth_service.login(
            {"email": email, "password": password}, token_provider=get_token_provider()
        )
    assert excinfo.value.error_code == ErrorCode.INVALID_CREDENTIALS


def test_protected_route_requires_token(client):
    resp = client.get("/api/users/me")
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "A003"


def test_invalid_token_rejected(client):
    resp = client.get("/api/users/me", headers={"Authorization": "Bearer invalid-token"})
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "A001"


def test_expired_token_rejected(client, login_as):
    login_as("late@example.com")
    secret = app.config["JWT_SECRET"]
    expired = jwt.encode(
        {"sub": "late@example.com", "authorities": ["ROLE_USER"], "iat": 0, "exp": 1},
        secret,
        algorithm="HS256",
    )

    resp = client.get("/api/users/me", headers={"Authorization": f"Bearer {expired}"})
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "A002"


def test_token_for_deleted_user_rejected(client, auth_headers):
    assert client.delete("/api/users/me", headers=auth_headers).status_code == 200

    resp = client.get("/api/users/me", headers=auth_headers)
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "A001"


def test_token_signed_with_rotated_secret_rejected(client, auth_headers):
    original = app.config["JWT_SECRET"]
    app.config["JWT_SECRET"] = "rotated-secret-rotated-secret-rotated"
    try:
        resp = client.get("/api/users/me", headers=auth_headers)
    finally:
        app.config["JWT_SECRET"] = original
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "A001"


def test_update_profile_name_and_password(client, auth_headers):
    resp = client.patch("/api/users/me", headers=auth_headers, json={"name": "Renamed"})
    assert resp.status_code == 200
    assert resp.get_json()["name"] == "Renamed"

    wrong = client.patch(
        "/api/users/me",
        headers=auth_headers,
        json={"password": "NewPassword1", "currentPassword": "not-the-password"},
    )
    assert wrong.status_code == 400
    assert wrong.get_json()["code"] == "U003"

    ok = client.patch(
        "/api/users/me",
        headers=auth_headers,
        json={"password": "NewPassword1", "currentPassword": "Password123!"},
    )
    assert ok.status_code == 200

    login = client.post(
        "/api/auth/login", json={"email": "user@example.com", "password": "NewPassword1"}
    )
    assert login.status_code == 200


def test_update_profile_requires_a_field(client, auth_headers):
    resp = client.patch("/api/users/me", headers=auth_headers, json={})
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "V001"


def test_provider_uses_configured_lifetime(client):
    provider = TokenProvider.from_config(app.config)
    assert provider.expiration_seconds == app.config["JWT_EXP_SECONDS"]
