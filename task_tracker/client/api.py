"""
HTTP client for the task API
"""

import logging
from datetime import date
from enum import Enum
from typing import Any

import httpx
from pydantic import ValidationError

from ..models import Task

logger = logging.getLogger(__name__)

TASKS_ENDPOINT = "/api/tasks"

# Reported when a 2xx body is not what the API promises
BAD_GATEWAY = 502
INVALID_RESPONSE = "Invalid response from server"

# Python field name -> wire key for update/create bodies
WIRE_KEYS = {
    "title": "title",
    "description": "description",
    "due_date": "dueDate",
    "priority": "priority",
    "status": "status",
    "project": "project",
}


class ApiError(Exception):
    """Error response, or unusable 2xx body, from the task API"""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


def _parse_task(data: Any) -> Task:
    try:
        return Task.model_validate(data)
    except ValidationError as e:
        logger.warning("Malformed task record: %s", e)
        raise ApiError(BAD_GATEWAY, INVALID_RESPONSE) from e


def _to_wire(fields: dict[str, Any]) -> dict[str, Any]:
    body = {}
    for name, value in fields.items():
        if isinstance(value, date):
            value = value.isoformat()
        elif isinstance(value, Enum):
            value = value.value
        body[WIRE_KEYS.get(name, name)] = value
    return body


class TaskApiClient:
    """Async client for the task collection resource"""

    def __init__(
        self,
        base_url: str,
        user_id: str,
        identity_header: str = "X-User-Id",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize task API client

        Args:
            base_url: Base URL of the task API server
            user_id: Identity sent with every request
            identity_header: Header carrying the identity
            timeout: Request timeout in seconds
            transport: Optional transport (tests, in-process apps)
        """
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={identity_header: user_id},
            timeout=timeout,
            transport=transport,
        )

    async def _request(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> Any:
        """
        Send one request to the task collection

        Raises:
            ApiError: On a non-2xx response or a body that is not JSON
            httpx.RequestError: On transport failure
        """
        logger.debug("Request: %s %s params=%s", method, TASKS_ENDPOINT, params)
        response = await self.client.request(
            method, TASKS_ENDPOINT, params=params, json=json_data
        )
        logger.debug("Response status: %s", response.status_code)

        if response.is_error:
            try:
                message = response.json().get("error") or response.reason_phrase
            except (ValueError, AttributeError):
                message = response.reason_phrase
            logger.warning("%s %s failed: %s %s", method, TASKS_ENDPOINT, response.status_code, message)
            raise ApiError(response.status_code, message)

        try:
            return response.json()
        except ValueError as e:
            logger.warning("%s %s returned a non-JSON body", method, TASKS_ENDPOINT)
            raise ApiError(BAD_GATEWAY, INVALID_RESPONSE) from e

    async def list_tasks(self) -> list[Task]:
        """Fetch all tasks of the current user"""
        data = await self._request("GET")
        if not isinstance(data, list):
            raise ApiError(BAD_GATEWAY, INVALID_RESPONSE)
        return [_parse_task(item) for item in data]

    async def create_task(self, title: str, **fields: Any) -> Task:
        """Create a task; ``fields`` may hold description, due_date, priority, project"""
        body = _to_wire({"title": title, **fields})
        return _parse_task(await self._request("POST", json_data=body))

    async def update_task(self, task_id: int, **changes: Any) -> Task:
        """
        Partially update a task

        Only keyword arguments actually passed are sent; passing None clears
        a nullable field on the server.
        """
        body = {"id": task_id, **_to_wire(changes)}
        return _parse_task(await self._request("PUT", json_data=body))

    async def delete_task(self, task_id: int) -> None:
        """Delete a task"""
        await self._request("DELETE", params={"id": task_id})

    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
