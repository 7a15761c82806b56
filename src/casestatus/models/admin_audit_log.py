"""Audit logging model for administrator actions."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from casestatus.core.db import Base
from casestatus.utils.datetime import now_utc


class AdminAuditLog(Base):
    """Append-only trail of logins, logouts and case changes."""

    __tablename__ = "admin_audit_log"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # WHO
    admin_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        index=True,
    )

    # WHAT
    action: Mapped[str] = mapped_column(String(30), nullable=False)  # AuditAction
    resource_type: Mapped[str] = mapped_column(String(30), nullable=False)
    resource_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    details: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )

    # WHEN
    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc,
        index=True,
    )

    def __repr__(self) -> str:
        return (
            f"<AdminAuditLog(admin_id={self.admin_id}, action={self.action}, "
            f"resource_id={self.resource_id})>"
        )
