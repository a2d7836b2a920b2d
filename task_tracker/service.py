"""Task resource service.

Each operation takes the caller's identity explicitly and scopes every
persistence call to it. Validation failures raise InvalidArgument, missing
or foreign ids raise NotFound, and storage failures become Internal.
"""

from __future__ import annotations

import logging
import re
import sqlite3
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from . import db
from .errors import Internal, InvalidArgument, NotFound, Unauthenticated
from .models import Task, TaskCreate, TaskUpdate, invalid_argument, task_id_in_range

logger = logging.getLogger(__name__)

TASK_ID_PATTERN = re.compile(r"-?[0-9]+")


def _require_identity(owner_id: str | None) -> str:
    if not owner_id or not owner_id.strip():
        raise Unauthenticated()
    return owner_id


def _require_object(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise InvalidArgument("body", "Request body must be a JSON object")
    return payload


def _require_task_id(task_id: int) -> int:
    if not task_id_in_range(task_id):
        raise InvalidArgument("id", "Task ID is out of range")
    return task_id


def list_tasks(owner_id: str | None) -> list[Task]:
    """Return the caller's tasks, most recently created first."""
    owner_id = _require_identity(owner_id)
    try:
        rows = db.get_all_tasks(owner_id)
    except sqlite3.Error as exc:
        logger.exception("Error fetching tasks owner=%s", owner_id)
        raise Internal() from exc
    return [Task.model_validate(row) for row in rows]


def get_task(owner_id: str | None, task_id: int) -> Task:
    """Return one task owned by the caller."""
    owner_id = _require_identity(owner_id)
    task_id = _require_task_id(task_id)
    try:
        row = db.get_task_by_id(task_id, owner_id)
    except sqlite3.Error as exc:
        logger.exception("Error fetching task id=%s owner=%s", task_id, owner_id)
        raise Internal() from exc
    if row is None:
        raise NotFound()
    return Task.model_validate(row)


def create_task(owner_id: str | None, payload: Any) -> Task:
    """Validate ``payload`` and persist a new task for the caller."""
    owner_id = _require_identity(owner_id)
    try:
        data = TaskCreate.model_validate(_require_object(payload))
    except ValidationError as exc:
        raise invalid_argument(exc) from None

    try:
        row = db.create_task(
            owner_id,
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            priority=data.priority,
            project=data.project,
        )
    except sqlite3.Error as exc:
        logger.exception("Error creating task owner=%s", owner_id)
        raise Internal() from exc

    logger.info("Task created id=%s owner=%s", row["id"], owner_id)
    return Task.model_validate(row)


def update_task(owner_id: str | None, payload: Any) -> Task:
    """Apply the fields present in ``payload`` to one owned task.

    An update carrying only the id still succeeds and refreshes updatedAt.
    """
    owner_id = _require_identity(owner_id)
    try:
        data = TaskUpdate.model_validate(_require_object(payload))
    except ValidationError as exc:
        raise invalid_argument(exc) from None

    changes = data.changes()
    try:
        row = db.update_task(data.id, owner_id, changes)
    except sqlite3.Error as exc:
        logger.exception("Error updating task id=%s owner=%s", data.id, owner_id)
        raise Internal() from exc

    if row is None:
        logger.warning("Update target missing id=%s owner=%s", data.id, owner_id)
        raise NotFound()

    logger.info(
        "Task updated id=%s owner=%s fields=%s", data.id, owner_id, sorted(changes)
    )
    return Task.model_validate(row)


def parse_task_id(raw: str | None) -> int:
    """Parse the ``id`` query parameter of a delete request."""
    if raw is None or not raw.strip():
        raise InvalidArgument("id", "Task ID is required")
    raw = raw.strip()
    if not TASK_ID_PATTERN.fullmatch(raw):
        raise InvalidArgument("id", "Task ID must be a valid number")
    return _require_task_id(int(raw))


def delete_task(owner_id: str | None, task_id: int) -> None:
    """Permanently remove one owned task."""
    owner_id = _require_identity(owner_id)
    task_id = _require_task_id(task_id)
    try:
        deleted = db.delete_task(task_id, owner_id)
    except sqlite3.Error as exc:
        logger.exception("Error deleting task id=%s owner=%s", task_id, owner_id)
        raise Internal() from exc

    if not deleted:
        logger.warning("Delete target missing id=%s owner=%s", task_id, owner_id)
        raise NotFound()

    logger.info("Task deleted id=%s owner=%s", task_id, owner_id)
