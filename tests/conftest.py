"""Shared fixtures: in-memory SQLite database, app, client, admin token."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient

from parking_registry.config import Settings
from parking_registry.database import Database
from parking_registry.main import create_app
from parking_registry.services.auth_service import create_token, ensure_admin


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-secret",
        LOG_DIR=None,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def database():
    database = Database("sqlite://")
    database.create_tables()
    yield database
    database.engine.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def app(settings):
    app = create_app(settings)
    app.state.db.create_tables()
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def app_db(app):
    session = app.state.db.session()
    yield session
    session.close()


@pytest.fixture
def admin_headers(app_db, settings):
    ensure_admin(app_db, "admin", "admin123")
    token = create_token(settings, "admin", "admin")
    return {"Authorization": f"Bearer {token}"}


