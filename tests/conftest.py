# tests/conftest.py

from pathlib import Path

import pytest

from taskboard import Settings, create_app
from taskboard.storage import JsonStore

from .fakes import TEST_SECRET, FakeClock


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(storage_dir=tmp_path / "storage", jwt_secret=TEST_SECRET)


@pytest.fixture()
def store() -> JsonStore:
    return JsonStore()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def register(client):
    """Register a user and return (auth headers, user json)."""

    def _register(username, password="secret1"):
        resp = client.post("/api/auth/register", json={"username": username, "password": password})
        assert resp.status_code == 201, resp.get_json()
        body = resp.get_json()
        return {"Authorization": f"Bearer {body['token']}"}, body["user"]

    return _register
