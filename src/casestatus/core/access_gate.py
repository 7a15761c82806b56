# File: src/casestatus/core/access_gate.py
"""Administrator access gate.

Start -> session valid? -> no: Denied
                        -> yes -> admin record? -> no: Denied
                                                -> yes: Granted

The registry is never consulted for a caller without a valid session. Both
denial branches (no session, not an admin) and backend failures end in the
same Denied outcome; the reason is kept for logs only.
"""

import enum
from typing import Literal, Protocol, Union

from pydantic import BaseModel

from casestatus.core.errors import CollaboratorError, NotFoundError, UnauthenticatedError
from casestatus.core.logging import get_logger
from casestatus.core.sentry import capture_collaborator_error
from casestatus.models.admin_schemas import AdminUserRead, IdentitySession

logger = get_logger(__name__)


class DenialReason(str, enum.Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"


class Granted(BaseModel):
    kind: Literal["granted"] = "granted"
    admin: AdminUserRead


class Denied(BaseModel):
    kind: Literal["denied"] = "denied"
    reason: DenialReason


AccessDecision = Union[Granted, Denied]


class IdentityProvider(Protocol):
    async def get_current_session(self) -> IdentitySession: ...


class AdminRegistry(Protocol):
    async def find_admin_by_key(self, key: str) -> AdminUserRead: ...


async def check_admin_access(identity: IdentityProvider, registry: AdminRegistry) -> AccessDecision:
    """Decide whether the current caller may see administrator views."""
    # Step 1: session
    try:
        session = await identity.get_current_session()
    except UnauthenticatedError as exc:
        logger.info("access_gate.denied", reason=DenialReason.UNAUTHENTICATED.value, detail=exc.message)
        return Denied(reason=DenialReason.UNAUTHENTICATED)
    except CollaboratorError as exc:
        logger.error(
            "access_gate.identity_unavailable",
            collaborator=exc.collaborator,
            error=str(exc.__cause__ or exc),
        )
        capture_collaborator_error(exc, gate_step="session")
        return Denied(reason=DenialReason.UNAUTHENTICATED)

    # Step 2: administrator registry
    try:
        admin = await registry.find_admin_by_key(session.user_id)
    except NotFoundError:
        logger.info(
            "access_gate.denied",
            reason=DenialReason.FORBIDDEN.value,
            user_id=session.user_id,
        )
        return Denied(reason=DenialReason.FORBIDDEN)
    except CollaboratorError as exc:
        logger.error(
            "access_gate.registry_unavailable",
            collaborator=exc.collaborator,
            user_id=session.user_id,
            error=str(exc.__cause__ or exc),
        )
        capture_collaborator_error(exc, gate_step="registry")
        return Denied(reason=DenialReason.FORBIDDEN)

    # Step 3: grant
    logger.info("access_gate.granted", user_id=admin.id, role=admin.role)
    return Granted(admin=admin)
