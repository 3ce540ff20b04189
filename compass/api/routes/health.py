from __future__ import annotations

from datetime import UTC, datetime

import structlog
from compass.core.config import get_settings
from compass.infrastructure.db.session import get_session_factory
from fastapi import APIRouter
from sqlalchemy import text

router = APIRouter(tags=["Observability"])
logger = structlog.get_logger()


async def check_postgres() -> dict:
    """Check the entity store database connection."""
    try:
        session_factory = get_session_factory()
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
            return {"status": "ok"}
    except Exception as e:
        return {"status": "error", "message": str(e)[:100]}


@router.get("/health", summary="Service health probe")
async def health_check() -> dict:
    """Return basic service and datastore status information."""
    settings = get_settings()

    postgres_status = await check_postgres()
    overall_status = "ok" if postgres_status.get("status") == "ok" else "degraded"

    payload = {
        "service": settings.app_name,
        "version": settings.version,
        "status": overall_status,
        "timestamp": datetime.now(UTC).isoformat(),
        "datastores": {
            "postgres": postgres_status,
        },
    }
    logger.info("health_probe", **payload)
    return payload
