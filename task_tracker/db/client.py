"""SQLite database operations for tasks.

Every statement that touches an existing row is conjoined with the owner id.
"""

import sqlite3
from contextlib import contextmanager
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Iterator

from ..config import get_settings

# Maps updatable task fields to their column names.
COLUMNS = {
    "title": "title",
    "description": "description",
    "due_date": "due_date",
    "priority": "priority",
    "status": "status",
    "project": "project",
}


def utc_now() -> str:
    """Current UTC time as a fixed-width ISO-8601 string (sorts lexically)."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def get_connection() -> sqlite3.Connection:
    """Get a database connection with WAL mode enabled."""
    path = get_settings().database_path
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


@contextmanager
def get_db() -> Iterator[sqlite3.Connection]:
    """Context manager for database connections."""
    conn = get_connection()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db() -> None:
    """Initialize the database schema."""
    with get_db() as conn:
        # AUTOINCREMENT keeps ids of deleted rows from being reused.
        conn.execute("""
            CREATE TABLE IF NOT EXISTS tasks (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                owner_id TEXT NOT NULL,
                title TEXT NOT NULL,
                description TEXT,
                due_date TEXT,
                priority TEXT NOT NULL DEFAULT 'medium',
                status TEXT NOT NULL DEFAULT 'pending',
                project TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_tasks_owner_created_at
            ON tasks(owner_id, created_at)
        """)


def _to_db(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def create_task(
    owner_id: str,
    title: str,
    description: str | None,
    due_date: date | None,
    priority: str,
    project: str | None,
) -> dict:
    """Create a new task owned by ``owner_id``."""
    now = utc_now()
    with get_db() as conn:
        cursor = conn.execute(
            """
            INSERT INTO tasks (
                owner_id, title, description, due_date, priority, status,
                project, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, 'pending', ?, ?, ?)
            """,
            (
                owner_id,
                title,
                description,
                _to_db(due_date),
                _to_db(priority),
                project,
                now,
                now,
            ),
        )
        task_id = cursor.lastrowid
    return get_task_by_id(task_id, owner_id)


def get_all_tasks(owner_id: str) -> list[dict]:
    """Get all tasks of one owner, newest first."""
    with get_db() as conn:
        cursor = conn.execute(
            """
            SELECT * FROM tasks
            WHERE owner_id = ?
            ORDER BY created_at DESC, id DESC
            """,
            (owner_id,),
        )
        return [dict(row) for row in cursor.fetchall()]


def get_task_by_id(task_id: int, owner_id: str) -> dict | None:
    """Get a task by ID, only if it belongs to ``owner_id``."""
    with get_db() as conn:
        cursor = conn.execute(
            "SELECT * FROM tasks WHERE id = ? AND owner_id = ?",
            (task_id, owner_id),
        )
        row = cursor.fetchone()
        return dict(row) if row else None


def update_task(task_id: int, owner_id: str, changes: dict[str, Any]) -> dict | None:
    """Apply ``changes`` to an owned task and refresh updated_at.

    Returns None when no row matches the (id, owner) pair.
    """
    updates = []
    params: list[Any] = []

    for field, value in changes.items():
        updates.append(f"{COLUMNS[field]} = ?")
        params.append(_to_db(value))

    updates.append("updated_at = ?")
    params.append(utc_now())
    params.extend((task_id, owner_id))

    with get_db() as conn:
        cursor = conn.execute(
            f"UPDATE tasks SET {', '.join(updates)} WHERE id = ? AND owner_id = ?",
            params,
        )
        if cursor.rowcount == 0:
            return None
    return get_task_by_id(task_id, owner_id)


def delete_task(task_id: int, owner_id: str) -> bool:
    """Delete an owned task by ID."""
    with get_db() as conn:
        cursor = conn.execute(
            "DELETE FROM tasks WHERE id = ? AND owner_id = ?",
            (task_id, owner_id),
        )
        return cursor.rowcount > 0
