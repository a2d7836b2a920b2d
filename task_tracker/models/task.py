"""Pydantic models for the task API."""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from ..errors import InvalidArgument

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 2000
PROJECT_MAX_LENGTH = 100

# SQLite INTEGER range
MIN_TASK_ID = -(2**63)
MAX_TASK_ID = 2**63 - 1


class TaskPriority(str, Enum):
    """Task priority enumeration."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    """Task status enumeration."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


PRIORITY_VALUES = frozenset(p.value for p in TaskPriority)
STATUS_VALUES = frozenset(s.value for s in TaskStatus)


def _invalid(message: str) -> PydanticCustomError:
    return PydanticCustomError("invalid_argument", message)


def _optional_text(value: Any, label: str, max_length: int) -> str | None:
    """Trim a nullable text field; empty after trimming becomes None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise _invalid(f"{label} must be a string")
    value = value.strip()
    if len(value) > max_length:
        raise _invalid(f"{label} must be at most {max_length} characters")
    return value or None


def _required_title(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise _invalid("Title is required and must be a non-empty string")
    value = value.strip()
    if len(value) > TITLE_MAX_LENGTH:
        raise _invalid(f"Title must be at most {TITLE_MAX_LENGTH} characters")
    return value


def _priority(value: Any) -> TaskPriority:
    if not isinstance(value, str) or value not in PRIORITY_VALUES:
        raise _invalid("Priority must be low, medium, or high")
    return TaskPriority(value)


def _status(value: Any) -> TaskStatus:
    if not isinstance(value, str) or value not in STATUS_VALUES:
        raise _invalid("Status must be pending, in_progress, or completed")
    return TaskStatus(value)


def _calendar_day(moment: datetime) -> date:
    # offset-aware values are read on the UTC calendar
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date()


def task_id_in_range(value: int) -> bool:
    return MIN_TASK_ID <= value <= MAX_TASK_ID


def _due_date(value: Any) -> date:
    if isinstance(value, datetime):
        return _calendar_day(value)
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise _invalid("Invalid due date format")
    try:
        return _calendar_day(datetime.fromisoformat(value.strip()))
    except ValueError:
        raise _invalid("Invalid due date format") from None


def invalid_argument(exc: ValidationError) -> InvalidArgument:
    """Translate the first pydantic error into an InvalidArgument."""
    error = exc.errors()[0]
    field = str(error["loc"][0]) if error["loc"] else "body"
    if error["type"] == "invalid_argument":
        message = error["msg"]
    else:
        message = f"{field}: {error['msg']}"
    return InvalidArgument(field, message)


class WireModel(BaseModel):
    """Base model exchanging camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskCreate(WireModel):
    """Request model for creating a task.

    Field order is the validation order: the first failing field is reported.
    Empty optional values count as absent.
    """

    title: str = Field(default=None, validate_default=True)
    description: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    project: str | None = None
    due_date: date | None = None

    @field_validator("title", mode="before")
    @classmethod
    def _check_title(cls, value: Any) -> str:
        return _required_title(value)

    @field_validator("description", mode="before")
    @classmethod
    def _check_description(cls, value: Any) -> str | None:
        return _optional_text(value, "Description", DESCRIPTION_MAX_LENGTH)

    @field_validator("priority", mode="before")
    @classmethod
    def _check_priority(cls, value: Any) -> TaskPriority:
        if value is None or value == "":
            return TaskPriority.MEDIUM
        return _priority(value)

    @field_validator("project", mode="before")
    @classmethod
    def _check_project(cls, value: Any) -> str | None:
        return _optional_text(value, "Project", PROJECT_MAX_LENGTH)

    @field_validator("due_date", mode="before")
    @classmethod
    def _check_due_date(cls, value: Any) -> date | None:
        if value is None or value == "":
            return None
        return _due_date(value)


UPDATABLE_FIELDS = ("title", "description", "priority", "project", "status", "due_date")


class TaskUpdate(WireModel):
    """Request model for a partial update.

    A field left out of the body is untouched; a nullable field sent as
    null is cleared. ``changes()`` exposes exactly the provided fields.
    """

    id: int = Field(default=None, validate_default=True)
    title: str | None = None
    description: str | None = None
    priority: TaskPriority | None = None
    project: str | None = None
    status: TaskStatus | None = None
    due_date: date | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _check_id(cls, value: Any) -> int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise _invalid("Task ID is required and must be a number")
        if not task_id_in_range(value):
            raise _invalid("Task ID is out of range")
        return value

    @field_validator("title", mode="before")
    @classmethod
    def _check_title(cls, value: Any) -> str:
        return _required_title(value)

    @field_validator("description", mode="before")
    @classmethod
    def _check_description(cls, value: Any) -> str | None:
        return _optional_text(value, "Description", DESCRIPTION_MAX_LENGTH)

    @field_validator("priority", mode="before")
    @classmethod
    def _check_priority(cls, value: Any) -> TaskPriority:
        return _priority(value)

    @field_validator("project", mode="before")
    @classmethod
    def _check_project(cls, value: Any) -> str | None:
        return _optional_text(value, "Project", PROJECT_MAX_LENGTH)

    @field_validator("status", mode="before")
    @classmethod
    def _check_status(cls, value: Any) -> TaskStatus:
        return _status(value)

    @field_validator("due_date", mode="before")
    @classmethod
    def _check_due_date(cls, value: Any) -> date | None:
        if value is None:
            return None
        return _due_date(value)

    def changes(self) -> dict[str, Any]:
        """Map each provided field to its normalized value (None clears)."""
        return {
            name: getattr(self, name)
            for name in UPDATABLE_FIELDS
            if name in self.model_fields_set
        }


class Task(WireModel):
    """Canonical task record returned by the API."""

    id: int
    owner_id: str
    title: str
    description: str | None = None
    due_date: date | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    project: str | None = None
    created_at: datetime
    updated_at: datetime


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str


class DeleteResponse(BaseModel):
    """Confirmation returned by a successful delete."""

    message: str
