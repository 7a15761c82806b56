"""Administrator registry model."""

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from casestatus.core.db import Base
from casestatus.models.enums import AdminRole
from casestatus.utils.datetime import now_utc


class AdminUser(Base):
    """A row here, keyed by the user's id, is what makes a user an administrator."""

    __tablename__ = "admin_users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    email: Mapped[str] = mapped_column(String(255), nullable=False)

    full_name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        default="",
    )

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AdminRole.ADMIN.value,
    )

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc,
    )

    @property
    def display_name(self) -> str:
        """Full name, falling back to email."""
        return self.full_name.strip() or self.email

    def __repr__(self) -> str:
        return f"<AdminUser(email={self.email}, role={self.role})>"
