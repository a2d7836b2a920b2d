"""Error taxonomy shared by the service and the HTTP layer."""

from fastapi import status


class TaskError(Exception):
    """Base exception for task service errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class Unauthenticated(TaskError):
    """No identity accompanied the request."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class InvalidArgument(TaskError):
    """A request field failed validation."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class NotFound(TaskError):
    """No task with the given id belongs to the caller."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Task not found"):
        super().__init__(message)


class Internal(TaskError):
    """Unexpected persistence failure; details stay in the server log."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
