# File: src/casestatus/api/auth_helpers.py
"""Dependencies that put the access gate in front of admin routes."""

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from casestatus.core.access_gate import Granted, check_admin_access
from casestatus.core.collaborators import SessionIdentityProvider, SqlAdminRegistry
from casestatus.core.db import get_db
from casestatus.models.admin_schemas import AdminUserRead

LOGIN_URL = "/admin/login"


def get_identity_provider(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> SessionIdentityProvider:
    """Identity collaborator for the current request."""
    return SessionIdentityProvider(request, db)


def get_admin_registry(db: AsyncSession = Depends(get_db)) -> SqlAdminRegistry:
    """Administrator registry for the current request."""
    return SqlAdminRegistry(db)


async def require_admin(
    identity: SessionIdentityProvider = Depends(get_identity_provider),
    registry: SqlAdminRegistry = Depends(get_admin_registry),
) -> AdminUserRead:
    """Dependency to require an administrator; everyone else goes to the login page."""
    decision = await check_admin_access(identity, registry)
    if isinstance(decision, Granted):
        return decision.admin

    # Same redirect for every denial reason
    raise HTTPException(
        status_code=status.HTTP_303_SEE_OTHER,
        detail="Administrator access required",
        headers={"Location": LOGIN_URL},
    )
