"""Administrator notes attached to a case."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from casestatus.core.db import Base
from casestatus.utils.datetime import now_utc

if TYPE_CHECKING:
    from casestatus.models.immigration_case import ImmigrationCase


class CaseNote(Base):
    __tablename__ = "case_notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    case_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("immigration_cases.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    case: Mapped["ImmigrationCase"] = relationship("ImmigrationCase", back_populates="notes")

    admin_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    note: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=now_utc)

    def __repr__(self) -> str:
        return f"<CaseNote(case_id={self.case_id}, admin_id={self.admin_id})>"
