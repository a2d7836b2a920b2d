"""Client session: server round trips reconciled into a TaskStore."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from ..models import Task, TaskStatus
from .api import ApiError, TaskApiClient
from .store import TaskStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """User-visible outcome of an action."""

    kind: str  # success | error | warning | info
    title: str
    message: str


class ClearOutcome(str, Enum):
    NOTHING = "nothing"
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


def _log_notification(notification: Notification) -> None:
    level = logging.WARNING if notification.kind in ("error", "warning") else logging.INFO
    logger.log(level, "%s: %s", notification.title, notification.message)


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


class TaskSession:
    """
    Owns the TaskStore of one session and is its only writer.

    Every action reconciles from the server's response; failures become
    notifications and never propagate to the caller.
    """

    def __init__(
        self,
        api: TaskApiClient,
        store: TaskStore | None = None,
        notify: Callable[[Notification], None] | None = None,
    ) -> None:
        self.api = api
        self.store = store if store is not None else TaskStore()
        self._notify = notify or _log_notification

    def notify(self, kind: str, title: str, message: str) -> None:
        self._notify(Notification(kind, title, message))

    def _failed(self, action: str, exc: Exception) -> None:
        if isinstance(exc, ApiError):
            logger.warning("%s failed: %s", action, exc)
            self.notify("error", f"{action} Failed", exc.message)
        else:
            logger.warning("%s failed: %r", action, exc)
            self.notify(
                "error",
                "Network Error",
                f"Failed to {action.lower()}. Please check your connection.",
            )

    async def refresh(self) -> bool:
        """Replace local state with a fresh List from the server."""
        try:
            tasks = await self.api.list_tasks()
        except (ApiError, httpx.HTTPError) as exc:
            self._failed("Load Tasks", exc)
            return False
        self.store.reset(tasks)
        return True

    async def create(self, title: str, **fields: Any) -> Task | None:
        try:
            task = await self.api.create_task(title, **fields)
        except (ApiError, httpx.HTTPError) as exc:
            self._failed("Create Task", exc)
            return None
        self.store.prepend(task)
        self.notify("success", "Task Created", f'"{task.title}" was added.')
        return task

    async def update(self, task_id: int, **changes: Any) -> Task | None:
        try:
            task = await self.api.update_task(task_id, **changes)
        except (ApiError, httpx.HTTPError) as exc:
            self._failed("Update Task", exc)
            return None
        self.store.replace(task)
        self.notify("success", "Task Updated", f'"{task.title}" was saved.')
        return task

    async def toggle_status(self, task_id: int) -> Task | None:
        """Flip a task between completed and pending."""
        current = self.store.get(task_id)
        if current is None:
            self.notify("error", "Update Failed", f"Task {task_id} is not loaded.")
            return None

        new_status = (
            TaskStatus.PENDING
            if current.status == TaskStatus.COMPLETED
            else TaskStatus.COMPLETED
        )
        try:
            task = await self.api.update_task(task_id, status=new_status)
        except (ApiError, httpx.HTTPError) as exc:
            self._failed("Update Task", exc)
            return None

        self.store.replace(task)
        if task.status == TaskStatus.COMPLETED:
            self.notify("success", "Task Completed!", f'"{task.title}" is now done.')
        else:
            self.notify("success", "Task Reopened", f'"{task.title}" is now pending.')
        return task

    async def delete(self, task_id: int) -> bool:
        try:
            await self.api.delete_task(task_id)
        except (ApiError, httpx.HTTPError) as exc:
            self._failed("Delete Task", exc)
            return False
        self.store.remove(task_id)
        self.notify("success", "Task Deleted", "The task was removed.")
        return True

    async def clear_completed(self) -> ClearOutcome:
        """
        Delete every completed task concurrently.

        Local state is only trimmed when every delete succeeded; otherwise
        it is reloaded from the server.
        """
        targets = self.store.completed()
        if not targets:
            self.notify("info", "Nothing to clear", "There are no completed tasks to clear.")
            return ClearOutcome.NOTHING

        results = await asyncio.gather(
            *(self.api.delete_task(task.id) for task in targets),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        for failure in failures:
            logger.warning("Bulk delete failure: %r", failure)
        succeeded = len(targets) - len(failures)

        if not failures:
            for task in targets:
                self.store.remove(task.id)
            self.notify(
                "success",
                "Completed Tasks Cleared",
                f"Successfully deleted {succeeded} completed task{_plural(succeeded)}.",
            )
            return ClearOutcome.SUCCESS

        if succeeded:
            self.notify(
                "warning",
                "Partial Success",
                f"Deleted {succeeded} of {len(targets)} tasks. Some deletions failed.",
            )
            outcome = ClearOutcome.PARTIAL
        else:
            self.notify(
                "error",
                "Clear Failed",
                "Failed to clear completed tasks. Please try again.",
            )
            outcome = ClearOutcome.FAILED

        await self.refresh()
        return outcome
