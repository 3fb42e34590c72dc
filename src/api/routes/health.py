"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from src.application.dto.responses import HealthResponse
from src.config import get_logger, get_settings

router = APIRouter(prefix="/api/health", tags=["health"])

logger = get_logger(__name__)

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Service and database health.

    Reports ``unhealthy`` when the database cannot be queried.
    """
    from src.infrastructure.storage.sqlite import get_connection

    settings = get_settings()
    database = "ok"
    schema_version = None
    try:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT COUNT(*) AS applied FROM schema_migrations")
            row = await cursor.fetchone()
            schema_version = row["applied"]
    except Exception as e:
        logger.warning("health_database_check_failed", error=str(e))
        database = f"error: {e}"

    return HealthResponse(
        status="healthy" if database == "ok" else "unhealthy",
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
        database=database,
        schema_version=schema_version,
    )
