# File: src/casestatus/core/collaborators.py
"""Database-backed identity, administrator registry and case lookups.

Each collaborator answers one question and reports failure through the
app error hierarchy:

- ``UnauthenticatedError`` / ``NotFoundError`` for a genuine "no"
- ``CollaboratorError`` when the backend could not answer (transport failure,
  ambiguous result)

The access gate and the case resolver decide what those failures mean for the
caller; collaborators never redirect or render anything.
"""

import os
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import MultipleResultsFound, NoResultFound, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from casestatus.core.errors import CollaboratorError, NotFoundError, UnauthenticatedError
from casestatus.core.logging import get_logger
from casestatus.models.admin_schemas import AdminUserRead, IdentitySession
from casestatus.models.admin_user import AdminUser
from casestatus.models.case_schemas import CaseRead
from casestatus.models.immigration_case import ImmigrationCase
from casestatus.models.user import User
from casestatus.utils.datetime import now_utc

logger = get_logger(__name__)

# Inactivity timeout for admin sessions (seconds)
ADMIN_SESSION_TIMEOUT = int(os.getenv("ADMIN_SESSION_TIMEOUT_SECONDS", str(2 * 60 * 60)))

SESSION_USER_KEY = "user_id"
SESSION_ACTIVITY_KEY = "last_activity"


def start_session(request: Request, user: User) -> None:
    """Bind a freshly authenticated user to the cookie session."""
    request.session.clear()
    request.session[SESSION_USER_KEY] = str(user.id)
    request.session[SESSION_ACTIVITY_KEY] = now_utc().isoformat()


def _parse_activity(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw).replace(tzinfo=timezone.utc)
    except (ValueError, TypeError):
        return None


class SessionIdentityProvider:
    """Identity collaborator backed by the signed cookie session and the users table."""

    def __init__(self, request: Request, db: AsyncSession, timeout_seconds: int = ADMIN_SESSION_TIMEOUT):
        self.request = request
        self.db = db
        self.timeout_seconds = timeout_seconds

    async def get_current_session(self) -> IdentitySession:
        """Return the caller's identity or raise UnauthenticatedError."""
        session = self.request.session
        user_id = session.get(SESSION_USER_KEY)
        if not user_id:
            raise UnauthenticatedError("No session")

        now = now_utc().replace(tzinfo=timezone.utc)
        last_activity = _parse_activity(session.get(SESSION_ACTIVITY_KEY))

        if last_activity is None or (now - last_activity) > timedelta(seconds=self.timeout_seconds):
            session.clear()
            logger.info(
                "auth.session_expired",
                user_id=user_id,
                timeout_seconds=self.timeout_seconds,
            )
            raise UnauthenticatedError("Session expired")

        try:
            user_uuid = UUID(user_id)
        except (ValueError, TypeError):
            session.clear()
            raise UnauthenticatedError("Invalid user session")

        try:
            result = await self.db.execute(
                select(User).where((User.id == user_uuid) & (User.is_active))
            )
            user = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise CollaboratorError("identity", "Identity store unavailable") from exc

        if user is None:
            session.clear()
            raise UnauthenticatedError("User not found or inactive")

        session[SESSION_ACTIVITY_KEY] = now_utc().isoformat()
        return IdentitySession(user_id=user.id, email=user.email)


class SqlAdminRegistry:
    """Administrator registry: one admin_users row per authorized identity."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_admin_by_key(self, key: str) -> AdminUserRead:
        try:
            admin_uuid = UUID(str(key))
        except ValueError:
            raise NotFoundError("AdminUser", str(key))

        try:
            result = await self.db.execute(select(AdminUser).where(AdminUser.id == admin_uuid))
            admin = result.scalar_one()
        except NoResultFound:
            raise NotFoundError("AdminUser", str(key))
        except MultipleResultsFound as exc:
            raise CollaboratorError("admin_registry", "Ambiguous administrator record") from exc
        except SQLAlchemyError as exc:
            raise CollaboratorError("admin_registry", "Administrator registry unavailable") from exc

        return AdminUserRead.model_validate(admin)


class SqlCaseRepository:
    """Case-data collaborator: compound-key lookup over immigration_cases."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_case(self, registration_number: str, nationality: str) -> CaseRead:
        stmt = select(ImmigrationCase).where(
            (ImmigrationCase.registration_number == registration_number)
            & (ImmigrationCase.nationality == nationality)
        )
        try:
            result = await self.db.execute(stmt)
            record = result.scalar_one()
        except NoResultFound:
            raise NotFoundError("ImmigrationCase", registration_number)
        except MultipleResultsFound as exc:
            raise CollaboratorError("case_data", "Ambiguous case record") from exc
        except SQLAlchemyError as exc:
            raise CollaboratorError("case_data", "Case store unavailable") from exc

        return CaseRead.model_validate(record)
