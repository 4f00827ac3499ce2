"""FastAPI application for the feedtags API."""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.middleware.base import RequestResponseEndpoint
from starlette.responses import Response

from feedtags import __version__
from feedtags.api.exception_handlers import register_exception_handlers
from feedtags.api.middleware import RequestIdMiddleware
from feedtags.api.routers import health, user_tags
from feedtags.config.database import db_manager

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Dispose of the database engine on shutdown."""
    yield
    await db_manager.close()


app = FastAPI(
    title="Feedtags API",
    description="User tags for feed entries: tag lifecycle and entry tagging",
    version=__version__,
    lifespan=lifespan,
)


@app.middleware("http")
async def log_requests(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    """
    Log each request and its response.

    Responses are logged at INFO for 2xx/3xx, WARNING for 4xx and ERROR
    for 5xx, with the time taken.
    """
    start_time = time.perf_counter()
    method = request.method
    path = request.url.path
    logger.info("Request: %s %s", method, path)

    response = await call_next(request)

    duration = time.perf_counter() - start_time
    status_code = response.status_code
    if status_code >= 500:
        log_level = logging.ERROR
    elif status_code >= 400:
        log_level = logging.WARNING
    else:
        log_level = logging.INFO
    logger.log(
        log_level, "Response: %s %s - %d (%.3fs)", method, path, status_code, duration
    )
    return response


# Added last so it runs first and the ID is set while requests are logged
app.add_middleware(RequestIdMiddleware)

register_exception_handlers(app)

app.include_router(health.router, prefix=API_PREFIX, tags=["health"])
app.include_router(user_tags.router, prefix=API_PREFIX, tags=["user-tags"])
