"""Pytest fixtures: app built from test settings, fake media host, clients."""
import asyncio
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, select

from portal.app import create_app
from portal.core import Settings
from portal.media import MediaUploadError
from portal.models import Trophy


class FakeMediaHost:
    """In-memory media host recording every upload it receives."""

    def __init__(self):
        self.calls = []
        self.fail_on = set()
        self.delays = {}

    async def upload(self, data, folder, filename=None):
        self.calls.append((folder, filename, len(data)))
        delay = self.delays.get(filename)
        if delay:
            await asyncio.sleep(delay)
        if filename in self.fail_on:
            raise MediaUploadError(f"rejected {filename}")
        return f"https://media.test/{folder}/{filename}"


def _make_settings(tmp_path: Path, **overrides) -> Settings:
    values = {
        "secret_key": "test-secret-key",
        "database_url": "sqlite://",
        "games_dir": tmp_path / "games",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def media():
    return FakeMediaHost()


@pytest.fixture
def settings(tmp_path):
    return _make_settings(tmp_path)


@pytest.fixture
def app(settings, media):
    return create_app(settings, media_host=media)


@pytest.fixture
def client(app):
    """TestClient; lifespan creates the tables in the in-memory DB."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def logged_in(client):
    r = client.post(
        "/api/register",
        json={"name": "Player One", "email": "player@example.com", "password": "secret123"},
    )
    assert r.status_code == 200, r.text
    return client


@pytest.fixture
def trophies(app):
    """Callable returning every persisted trophy row."""

    def _rows():
        with Session(app.state.engine) as session:
            return session.exec(select(Trophy)).all()

    return _rows


@pytest.fixture
def make_settings(tmp_path):
    """Factory for settings with per-test overrides."""

    def _factory(**overrides):
        return _make_settings(tmp_path, **overrides)

    return _factory
