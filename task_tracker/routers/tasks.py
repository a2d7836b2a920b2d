"""Task API router."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from .. import service
from ..auth import current_user_id
from ..models import DeleteResponse, ErrorResponse, Task

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)


@router.get("", response_model=list[Task])
def list_tasks(user_id: str = Depends(current_user_id)):
    """Get the caller's tasks, newest first."""
    return service.list_tasks(user_id)


@router.get(
    "/{task_id}",
    response_model=Task,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
def get_task(task_id: int, user_id: str = Depends(current_user_id)):
    """Get a task by ID."""
    return service.get_task(user_id, task_id)


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
def create_task_endpoint(
    payload: Any = Body(...),
    user_id: str = Depends(current_user_id),
):
    """Create a new task."""
    return service.create_task(user_id, payload)


@router.put(
    "",
    response_model=Task,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
def update_task_endpoint(
    payload: Any = Body(...),
    user_id: str = Depends(current_user_id),
):
    """Partially update a task identified by the ``id`` in the body."""
    return service.update_task(user_id, payload)


@router.delete(
    "",
    response_model=DeleteResponse,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
def delete_task_endpoint(
    id: str | None = Query(None),
    user_id: str = Depends(current_user_id),
):
    """Delete a task identified by the ``id`` query parameter."""
    task_id = service.parse_task_id(id)
    service.delete_task(user_id, task_id)
    return DeleteResponse(message="Task deleted successfully")
