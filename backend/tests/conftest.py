import os

# Configure before the app module reads its environment.
os.environ.setdefault("MOMENTUM_JWT_SECRET", "momentum-test-secret-0123456789-abcdef")
os.environ["DATABASE_URL"] = os.environ.get("TEST_DATABASE_URL") or "sqlite://"

import pytest  # noqa: E402
from sqlalchemy.exc import SQLAlchemyError  # noqa: E402

from app import app  # noqa: E402
from enums import UserRole  # noqa: E402
from extensions import db  # noqa: E402
from repositories import users_repo  # noqa: E402

DEFAULT_PASSWORD = "Password123!"


@pytest.fixture()
def client():
    app.config.update({"TESTING": True})

    try:
        with app.app_context():
            db.session.remove()
            db.drop_all()
            db.create_all()
    except SQLAlchemyError as exc:  # pragma: no cover - skip if database unavailable
        pytest.skip(f"Test database not available: {exc}")

    with app.test_client() as client:
        yield client

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def app_ctx(client):
    with app.app_context():
        yield


@pytest.fixture()
def login_as(client):
    """Return a helper that signs a user up, logs in and returns auth headers."""

    def _login_as(
        email: str = "user@example.com",
        *,
        password: str = DEFAULT_PASSWORD,
        name: str = "Test User",
        role: UserRole = UserRole.ROLE_USER,
    ) -> dict:
        signup = client.post(
            "/api/auth/signup", json={"email": email, "password": password, "name": name}
        )
        assert signup.status_code == 201, signup.get_json()
        if role != UserRole.ROLE_USER:
            with app.app_context():
                users_repo.update_user(signup.get_json()["id"], {"role": role})

        login = client.post("/api/auth/login", json={"email": email, "password": password})
        assert login.status_code == 200, login.get_json()
        return {"Authorization": f"Bearer {login.get_json()['accessToken']}"}

    return _login_as


@pytest.fixture()
def auth_headers(login_as):
    return login_as()
