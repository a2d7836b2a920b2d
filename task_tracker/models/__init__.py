"""Models package."""

from .task import (
    DeleteResponse,
    ErrorResponse,
    Task,
    TaskCreate,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
    invalid_argument,
    task_id_in_range,
)

__all__ = [
    "TaskPriority",
    "TaskStatus",
    "TaskCreate",
    "TaskUpdate",
    "Task",
    "ErrorResponse",
    "DeleteResponse",
    "invalid_argument",
    "task_id_in_range",
]
