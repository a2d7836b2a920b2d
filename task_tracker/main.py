"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from . import __version__
from .config import get_settings
from .db import init_db
from .errors import TaskError
from .logging_setup import setup_logging
from .routers import tasks

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and initialize the database on startup."""
    settings = get_settings()
    setup_logging(settings.log_level)
    init_db()
    logger.info("Task store ready db=%s", settings.database_path)
    yield


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def task_error_handler(request: Request, exc: TaskError) -> JSONResponse:
    return _error(exc.status_code, exc.message)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid request"
    return _error(status.HTTP_400_BAD_REQUEST, message)


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Task Tracker",
        description="Personal task tracking API",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_exception_handler(TaskError, task_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
    app.include_router(tasks.router)
    return app


app = create_app()


def main():
    """Run the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "task_tracker.main:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
