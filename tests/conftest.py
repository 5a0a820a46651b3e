from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from attendance_app.config import Settings
from attendance_app.main import create_app


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'attendance.db'}"


@pytest.fixture
def make_settings(database_url):
    def _make(**overrides) -> Settings:
        values = {
            "DATABASE_URL": database_url,
            "DB_CONNECT_RETRIES": 1,
            "DB_CONNECT_RETRY_DELAY_MS": 0,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def client(make_settings):
    app = create_app(make_settings())
    with TestClient(app) as test_client:
        yield test_client
