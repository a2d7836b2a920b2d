# tests/test_cli.py

from __future__ import annotations

from datetime import date

from rich.console import Console

from task_tracker.cli import render_tasks
from task_tracker.client.store import TaskStore
from task_tracker.config import Settings

from .test_task_store import make_task


def test_render_tasks_shows_visible_of_total() -> None:
    store = TaskStore(
        [
            make_task(2, "Buy milk", project="Home", due_date=date(2025, 6, 1)),
            make_task(1, "Report", status="completed"),
        ]
    )
    store.filters.query = "milk"

    console = Console(record=True, width=120)
    console.print(render_tasks(store))
    output = console.export_text()

    assert "Buy milk" in output
    assert "Report" not in output
    assert "Jun 01, 2025" in output
    assert "Showing 1 of 2" in output


def test_settings_from_env(monkeypatch) -> None:
    monkeypatch.setenv("TASK_TRACKER_PORT", "not-a-port")
    monkeypatch.setenv("TASK_TRACKER_IDENTITY_HEADER", "X-Auth-User")
    monkeypatch.setenv("TASK_TRACKER_LOG_LEVEL", "debug")

    settings = Settings.from_env()
    assert settings.port == 8000
    assert settings.identity_header == "X-Auth-User"
    assert settings.log_level == "DEBUG"
