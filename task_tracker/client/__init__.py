"""Client side of the task tracker: API client, state container, session."""

from .api import ApiError, TaskApiClient
from .session import ClearOutcome, Notification, TaskSession
from .store import TaskFilters, TaskStats, TaskStore

__all__ = [
    "ApiError",
    "TaskApiClient",
    "TaskSession",
    "ClearOutcome",
    "Notification",
    "TaskStore",
    "TaskFilters",
    "TaskStats",
]
