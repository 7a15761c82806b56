# File: src/casestatus/api/routes/dashboard.py
"""Administrator dashboard (HTML + JSON statistics)."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from casestatus.api.auth_helpers import require_admin
from casestatus.api.utils import render
from casestatus.core.db import get_db
from casestatus.core.stats import get_dashboard_stats
from casestatus.models.admin_schemas import AdminUserRead, DashboardStats
from casestatus.models.immigration_case import ImmigrationCase

router = APIRouter(prefix="/admin", tags=["dashboard"])

RECENT_CASES_LIMIT = 10


@router.get("", include_in_schema=False)
@router.get("/", include_in_schema=False)
async def admin_root():
    """Redirect /admin and /admin/ to the dashboard."""
    return RedirectResponse(url="/admin/dashboard", status_code=302)


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    admin: AdminUserRead = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Dashboard with case statistics and the most recently updated cases."""
    stats = await get_dashboard_stats(db)

    result = await db.execute(
        select(ImmigrationCase).order_by(ImmigrationCase.updated_at.desc()).limit(RECENT_CASES_LIMIT)
    )
    recent_cases = result.scalars().all()

    return render(
        request,
        "admin/dashboard.html",
        {"admin": admin, "stats": stats, "recent_cases": recent_cases},
    )


@router.get("/dashboard/stats", response_model=DashboardStats)
async def dashboard_stats(
    admin: AdminUserRead = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> DashboardStats:
    """Dashboard statistics as JSON."""
    return await get_dashboard_stats(db)
