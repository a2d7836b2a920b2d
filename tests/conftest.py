# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from task_tracker.config import get_settings
from task_tracker.db import init_db
from task_tracker.main import create_app


@pytest.fixture(autouse=True)
def db_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point every test at its own SQLite file."""
    path = tmp_path / "tasks.db"
    monkeypatch.setenv("TASK_TRACKER_DB_PATH", str(path))
    monkeypatch.setenv("TASK_TRACKER_IDENTITY_HEADER", "X-User-Id")
    get_settings.cache_clear()
    init_db()
    yield path
    get_settings.cache_clear()


@pytest.fixture()
def app():
    return create_app()


@pytest.fixture()
def client(app) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        test_client.headers["X-User-Id"] = "user-a"
        yield test_client
