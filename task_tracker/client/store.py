"""In-session task state and the views derived from it."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ..models import Task, TaskStatus

ALL = "all"


@dataclass
class TaskFilters:
    """Active predicates; each one passes everything when left at its default."""

    query: str = ""
    status: str = ALL
    priority: str = ALL
    project: str = ALL

    def matches(self, task: Task) -> bool:
        if self.query:
            needle = self.query.lower()
            haystacks = (task.title, task.description or "", task.project or "")
            if not any(needle in text.lower() for text in haystacks):
                return False
        if self.status != ALL and task.status != self.status:
            return False
        if self.priority != ALL and task.priority != self.priority:
            return False
        if self.project != ALL and task.project != self.project:
            return False
        return True

    @property
    def active(self) -> bool:
        return self != TaskFilters()


@dataclass(frozen=True)
class TaskStats:
    total: int
    completed: int
    in_progress: int
    # unfiltered size, for "showing N of M"
    overall: int


class TaskStore:
    """
    Ordered, newest-first mirror of the server's task list.

    Only ``reset`` (after a List), ``prepend``, ``replace`` and ``remove``
    change the list, always with records returned by the server.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._tasks: list[Task] = list(tasks)
        self.filters = TaskFilters()

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: int) -> Task | None:
        return next((t for t in self._tasks if t.id == task_id), None)

    # ---- reconciliation ----

    def reset(self, tasks: Iterable[Task]) -> None:
        self._tasks = list(tasks)

    def prepend(self, task: Task) -> None:
        self._tasks.insert(0, task)

    def replace(self, task: Task) -> bool:
        """Swap in the record with the same id, keeping its position."""
        for index, current in enumerate(self._tasks):
            if current.id == task.id:
                self._tasks[index] = task
                return True
        return False

    def remove(self, task_id: int) -> bool:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        return len(self._tasks) != before

    # ---- derived views ----

    def filtered(self) -> list[Task]:
        return [t for t in self._tasks if self.filters.matches(t)]

    def stats(self) -> TaskStats:
        visible = self.filtered()
        return TaskStats(
            total=len(visible),
            completed=sum(1 for t in visible if t.status == TaskStatus.COMPLETED),
            in_progress=sum(1 for t in visible if t.status == TaskStatus.IN_PROGRESS),
            overall=len(self._tasks),
        )

    def projects(self) -> list[str]:
        """Distinct non-null projects across all tasks, in first-seen order."""
        return list(dict.fromkeys(t.project for t in self._tasks if t.project))

    def completed(self) -> list[Task]:
        return [t for t in self._tasks if t.status == TaskStatus.COMPLETED]

    def clear_filters(self) -> None:
        self.filters = TaskFilters()
