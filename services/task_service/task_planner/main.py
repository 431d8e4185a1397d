"""Application factory and server entry point."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import Settings
from .database import TaskStore
from .errors import TaskServiceError
from .routes import router
from .service import TaskService

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


async def task_service_error_handler(request: Request, exc: TaskServiceError):
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc
        )
    else:
        logger.warning(
            "%s %s rejected (%d): %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(
        "%s %s malformed request: %s", request.method, request.url.path, exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": "Bad request - check your data"})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception for %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Optional[Settings] = None, store=None) -> FastAPI:
    """Build the API around one store handle.

    The store is opened on startup and closed on shutdown. Pass ``store`` to
    use something other than MongoDB.
    """
    settings = settings or Settings.from_env()
    if store is None:
        store = TaskStore(settings.mongodb_uri, settings.db_name)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await store.open()
        try:
            yield
        finally:
            await store.close()

    app = FastAPI(title="Task Planner API", lifespan=lifespan)
    app.state.settings = settings
    app.state.task_service = TaskService(store)

    app.add_exception_handler(TaskServiceError, task_service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(router)
    return app


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    logger.info("Server running at http://%s:%d", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
