"""Health endpoint for load balancers and container health checks.

Always 200: the public site can render its home page while the case store is
down, so a failing dependency reports "degraded" instead of taking the
instance out of rotation.
"""

import time
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from casestatus.core.db import get_db
from casestatus.core.logging import get_logger
from casestatus.core.sentry import is_enabled as sentry_enabled
from casestatus.models.immigration_case import ImmigrationCase

logger = get_logger(__name__)

router = APIRouter(tags=["health"])

_app_start_time: datetime | None = None


def set_app_start_time(start_time: datetime) -> None:
    global _app_start_time
    _app_start_time = start_time


def get_uptime_seconds() -> int:
    if _app_start_time is None:
        return 0
    return int((datetime.now() - _app_start_time).total_seconds())


async def _timed_query(db: AsyncSession, stmt) -> dict[str, Any]:
    """Run one statement; report ok/down with elapsed milliseconds."""
    started = time.perf_counter()
    try:
        await db.execute(stmt)
    except (SQLAlchemyError, OSError) as exc:
        return {
            "status": "down",
            "response_time_ms": int((time.perf_counter() - started) * 1000),
            "error": type(exc).__name__,
        }
    return {"status": "ok", "response_time_ms": int((time.perf_counter() - started) * 1000)}


async def check_database(db: AsyncSession) -> dict[str, Any]:
    """Connectivity: SELECT 1."""
    return await _timed_query(db, text("SELECT 1"))


async def check_case_store(db: AsyncSession) -> dict[str, Any]:
    """The case table exists and is readable (migrations applied)."""
    return await _timed_query(db, select(ImmigrationCase.id).limit(1))


@router.get("/health", summary="Health check")
async def health_check(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    """
    Example (degraded):
        {
            "status": "degraded",
            "uptime_seconds": 3600,
            "error_tracking": false,
            "checks": {
                "database": {"status": "down", "response_time_ms": 1000, "error": "OperationalError"},
                "case_store": {"status": "down", "response_time_ms": 0, "error": "OperationalError"}
            }
        }
    """
    checks = {"database": await check_database(db)}
    if checks["database"]["status"] == "ok":
        checks["case_store"] = await check_case_store(db)
    else:
        checks["case_store"] = {**checks["database"], "response_time_ms": 0}

    healthy = all(check["status"] == "ok" for check in checks.values())
    if not healthy:
        logger.warning("health.degraded", failing=[name for name, c in checks.items() if c["status"] != "ok"])

    return JSONResponse(
        content={
            "status": "ok" if healthy else "degraded",
            "uptime_seconds": get_uptime_seconds(),
            "error_tracking": sentry_enabled(),
            "checks": checks,
        },
        status_code=200,
    )
