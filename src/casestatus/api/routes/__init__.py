# File: src/casestatus/api/routes/__init__.py
"""Route modules package."""

from casestatus.api.routes.admin import router as admin_router
from casestatus.api.routes.dashboard import router as dashboard_router
from casestatus.api.routes.public import router as public_router
from casestatus.api.routes.reports import router as reports_router

__all__ = ["admin_router", "dashboard_router", "public_router", "reports_router"]
