"""Health check endpoint - no user identity required."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from feedtags import __version__
from feedtags.api.deps import get_db
from feedtags.api.schemas.responses import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(session: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Report liveness and database reachability."""
    try:
        start = time.monotonic()
        await session.execute(text("SELECT 1"))
        latency_ms = int((time.monotonic() - start) * 1000)
    except SQLAlchemyError as e:
        logger.warning("Health check could not reach the database: %s", e)
        return HealthResponse(
            status="unhealthy", version=__version__, details={"database": "disconnected"}
        )

    return HealthResponse(
        status="healthy",
        version=__version__,
        details={"database": "connected", "database_latency_ms": latency_ms},
    )
