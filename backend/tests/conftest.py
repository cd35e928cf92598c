from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from tracker.config import Settings
from tracker.database import Database
from tracker.main import create_app
from tracker.migrations import migrate

ADMIN_USER = "tracker-admin"
ADMIN_PASS = "correct horse battery staple"
REDIRECT_URL = "https://example.com/profile/"


class FakeResolver:
    """Records looked-up IPs and answers with a fixed country."""

    def __init__(self, country="Chile"):
        self.country = country
        self.calls = []

    def __call__(self, ip):
        self.calls.append(ip)
        return self.country


def broken_session_factory():
    from sqlalchemy.exc import OperationalError

    raise OperationalError("SELECT 1", {}, Exception("unable to open database file"))


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'clicks.db'}",
        ADMIN_USER=ADMIN_USER,
        ADMIN_PASS=ADMIN_PASS,
        REDIRECT_URL=REDIRECT_URL,
        BACKUP_DIR=str(tmp_path / "backups"),
        RATE_LIMIT="1000/minute",
    )


@pytest.fixture
def database(settings):
    database = Database(settings.DATABASE_URL)
    migrate(database.engine)
    yield database
    database.close()


@pytest.fixture
def db(database):
    session = database.session_factory()
    yield session
    session.close()


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def app(settings, resolver):
    return create_app(settings, geo_resolver=resolver)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def app_session(app, client):
    """Session on the database opened by the running app."""
    session = app.state.database.session_factory()
    yield session
    session.close()


def at(day, hour=12, minute=0, second=0):
    """Naive UTC datetime on 2026-10-<day>."""
    return datetime(2026, 10, day, hour, minute, second)
