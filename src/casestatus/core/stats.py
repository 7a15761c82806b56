"""Dashboard statistics with a short in-process TTL cache."""

from datetime import datetime, timedelta, timezone

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from casestatus.core.logging import get_logger
from casestatus.models.admin_schemas import DashboardStats
from casestatus.models.admin_user import AdminUser
from casestatus.models.enums import (
    ACTIVE_STATUS_PATTERNS,
    COMPLETED_STATUS_PATTERN,
    REJECTED_STATUS_PATTERN,
)
from casestatus.models.immigration_case import ImmigrationCase
from casestatus.utils.datetime import today_local

logger = get_logger(__name__)

STATS_TTL_SECONDS = 60

# (stats, expires_at)
_stats_cache: tuple[DashboardStats, datetime] | None = None


def get_cached_stats() -> DashboardStats | None:
    """Return cached stats if present and not expired."""
    global _stats_cache

    if _stats_cache is None:
        return None

    stats, expires_at = _stats_cache
    if datetime.now(timezone.utc) > expires_at:
        _stats_cache = None
        return None
    return stats


def set_cached_stats(stats: DashboardStats, ttl_seconds: int = STATS_TTL_SECONDS) -> None:
    global _stats_cache
    _stats_cache = (stats, datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds))


def invalidate_stats() -> None:
    """Drop cached stats (call after any case mutation)."""
    global _stats_cache
    _stats_cache = None


async def _count(db: AsyncSession, *conditions) -> int:
    stmt = select(func.count(ImmigrationCase.id))
    if conditions:
        stmt = stmt.where(*conditions)
    result = await db.execute(stmt)
    return result.scalar() or 0


async def _count_admins(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(AdminUser.id)))
    return result.scalar() or 0


async def compute_dashboard_stats(db: AsyncSession) -> DashboardStats:
    """Count cases per status bucket.

    Falls back to plain totals when the detailed queries fail, and to all
    zeros when even those fail.
    """
    try:
        active_filter = or_(
            *(ImmigrationCase.appeal_status.ilike(pattern) for pattern in ACTIVE_STATUS_PATTERNS)
        )
        total_cases = await _count(db)
        active_cases = await _count(db, active_filter)
        stats = DashboardStats(
            total_cases=total_cases,
            active_cases=active_cases,
            pending_cases=active_cases,
            completed_cases=await _count(
                db, ImmigrationCase.appeal_status.ilike(COMPLETED_STATUS_PATTERN)
            ),
            rejected_cases=await _count(
                db, ImmigrationCase.appeal_status.ilike(REJECTED_STATUS_PATTERN)
            ),
            scheduled_hearings=await _count(
                db,
                ImmigrationCase.next_hearing_date.is_not(None),
                ImmigrationCase.next_hearing_date >= today_local(),
            ),
            total_admins=await _count_admins(db),
        )
    except SQLAlchemyError as exc:
        logger.error("dashboard.stats_failed", error=str(exc))
        await db.rollback()
        try:
            total_cases = await _count(db)
            stats = DashboardStats(
                total_cases=total_cases,
                active_cases=total_cases,
                pending_cases=total_cases,
                total_admins=await _count_admins(db),
            )
        except SQLAlchemyError as fallback_exc:
            logger.error("dashboard.stats_fallback_failed", error=str(fallback_exc))
            return DashboardStats()

    return stats


async def get_dashboard_stats(db: AsyncSession) -> DashboardStats:
    """Cached wrapper around compute_dashboard_stats."""
    cached = get_cached_stats()
    if cached is not None:
        return cached

    stats = await compute_dashboard_stats(db)
    set_cached_stats(stats)
    return stats
