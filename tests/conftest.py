import os

os.environ.setdefault("APP_ENV", "testing")

import pytest  # noqa: E402

from api import create_app  # noqa: E402
from models import storage  # noqa: E402


@pytest.fixture
def app(tmp_path):
    """A fresh app bound to its own in-memory database."""
    app = create_app("testing")
    app.config["UPLOAD_FOLDER"] = str(tmp_path / "uploads")
    yield app
    storage.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_service(app):
    return app.extensions["auth_service"]


@pytest.fixture
def register(client):
    """Register a user through the API and return the created user dict."""

    def _register(email="a@example.com", password="password123", name="Alice", birth_date="1990-01-01"):
        resp = client.post(
            "/api/v1/auth/register",
            json={"name": name, "email": email, "password": password, "birth_date": birth_date},
        )
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]

    return _register


@pytest.fixture
def login(client):
    """Log in through the API and return the token payload."""

    def _login(email="a@example.com", password="password123"):
        resp = client.post("/api/v1/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return resp.get_json()

    return _login


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(register, login):
    """Register and log in; returns (user dict, auth headers, tokens)."""

    def _make_user(email, name="User", password="password123"):
        user = register(email=email, password=password, name=name)
        tokens = login(email=email, password=password)
        return user, bearer(tokens["access_token"]), tokens

    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user("alice@example.com", name="Alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob@example.com", name="Bob")
