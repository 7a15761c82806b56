"""Administrator login and logout endpoints."""

from fastapi import APIRouter, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse
from pwdlib.exceptions import UnknownHashError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from casestatus.api.auth_helpers import LOGIN_URL, get_admin_registry, get_identity_provider
from casestatus.api.utils import render
from casestatus.core.access_gate import DenialReason, Granted, check_admin_access
from casestatus.core.audit import log_admin_action
from casestatus.core.collaborators import SessionIdentityProvider, SqlAdminRegistry, start_session
from casestatus.core.db import get_db
from casestatus.core.logging import get_logger
from casestatus.core.security import verify_and_rehash
from casestatus.models.enums import AuditAction, ResourceType
from casestatus.models.user import User

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])

DASHBOARD_URL = "/admin/dashboard"

LOGIN_ERRORS = {
    "invalid": "Credenciales inválidas. Por favor, verifique su email y contraseña.",
    "disabled": "Esta cuenta está desactivada.",
    "denied": "Acceso denegado. No tiene permisos de administrador.",
    "connection": "Error de conexión. Por favor, intente nuevamente.",
}


def _login_redirect(error: str) -> RedirectResponse:
    return RedirectResponse(url=f"{LOGIN_URL}?error={error}", status_code=302)


@router.get("/admin/login", response_class=HTMLResponse)
async def login_page(request: Request):
    """Render the administrator login form."""
    error = request.query_params.get("error")
    return render(
        request,
        "admin/login.html",
        {"error_message": LOGIN_ERRORS.get(error) if error else None},
    )


@router.post("/admin/login")
async def login(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    db: AsyncSession = Depends(get_db),
    registry: SqlAdminRegistry = Depends(get_admin_registry),
):
    """Check credentials, open a session, then require an administrator record."""
    email = email.strip().lower()
    if not email or not password:
        return _login_redirect("invalid")

    try:
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
    except SQLAlchemyError as exc:
        logger.error("auth.login_backend_error", error=str(exc))
        return _login_redirect("connection")

    valid = False
    new_hash = None
    if user is not None:
        try:
            valid, new_hash = verify_and_rehash(password, user.hashed_password)
        except UnknownHashError:
            logger.warning("auth.unknown_hash_format", user_id=str(user.id))

    if not valid:
        logger.warning("auth.login_failed", email=email)
        return _login_redirect("invalid")

    if not user.is_active:
        logger.warning("auth.login_disabled_account", user_id=str(user.id))
        return _login_redirect("disabled")

    if new_hash:
        user.hashed_password = new_hash

    start_session(request, user)

    decision = await check_admin_access(SessionIdentityProvider(request, db), registry)
    if not isinstance(decision, Granted):
        request.session.clear()
        # Session was just opened; UNAUTHENTICATED means the identity store failed
        if decision.reason == DenialReason.UNAUTHENTICATED:
            logger.error("auth.login_identity_unavailable", user_id=str(user.id))
            return _login_redirect("connection")
        logger.warning("auth.login_denied", user_id=str(user.id))
        return _login_redirect("denied")

    await log_admin_action(
        db,
        decision.admin.id,
        AuditAction.LOGIN,
        ResourceType.AUTH,
        details={"email": user.email},
    )
    logger.info("auth.login_success", user_id=decision.admin.id, role=decision.admin.role)
    return RedirectResponse(url=DASHBOARD_URL, status_code=302)


@router.post("/admin/logout")
async def logout(
    request: Request,
    db: AsyncSession = Depends(get_db),
    identity: SessionIdentityProvider = Depends(get_identity_provider),
    registry: SqlAdminRegistry = Depends(get_admin_registry),
):
    """Logout endpoint - audits administrator logouts and clears the session."""
    decision = await check_admin_access(identity, registry)
    if isinstance(decision, Granted):
        await log_admin_action(
            db,
            decision.admin.id,
            AuditAction.LOGOUT,
            ResourceType.AUTH,
            details={"email": decision.admin.email},
        )
        logger.info("auth.logout", user_id=decision.admin.id)

    request.session.clear()
    return RedirectResponse(url=LOGIN_URL, status_code=302)


@router.get("/admin/logout")
async def logout_get(
    request: Request,
    db: AsyncSession = Depends(get_db),
    identity: SessionIdentityProvider = Depends(get_identity_provider),
    registry: SqlAdminRegistry = Depends(get_admin_registry),
):
    """Logout GET endpoint for browser compatibility."""
    return await logout(request, db, identity, registry)
