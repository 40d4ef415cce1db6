"""
Health probes for orchestrators.

- /health, /health/live: process is up
- /health/db: database answers a trivial query
- /health/ready: ready for traffic (database reachable unless running in-memory)
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from campstay.api.deps import get_db_session
from campstay.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "campstay-booking-core"


async def _database_reachable(session: AsyncSession) -> bool:
    try:
        result = await session.execute(text("SELECT 1"))
        result.scalar()
        return True
    except Exception as e:
        logger.error("Database health check failed", exc_info=e)
        return False


@router.get("/health")
async def health_check():
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/live")
async def health_check_live():
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/db")
async def health_check_db(session: AsyncSession = Depends(get_db_session)):
    if await _database_reachable(session):
        return {"status": "healthy", "component": "database"}
    return JSONResponse(
        status_code=503,
        content={
            "status": "unhealthy",
            "component": "database",
            "error": "Database connection failed",
        },
    )


@router.get("/health/ready")
async def health_check_ready(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    checks = {"storage": "in_memory" if settings.use_in_memory else "sql"}
    if not settings.use_in_memory:
        healthy = await _database_reachable(session)
        checks["database"] = "healthy" if healthy else "unhealthy"
        if not healthy:
            return JSONResponse(
                status_code=503,
                content={"status": "not_ready", "checks": checks},
            )
    return {"status": "ready", "checks": checks}
