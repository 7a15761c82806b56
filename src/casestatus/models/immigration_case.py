# File: src/casestatus/models/immigration_case.py
"""Immigration case record model."""

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from casestatus.core.db import Base
from casestatus.models.enums import DEFAULT_APPEAL_STATUS
from casestatus.utils.datetime import now_utc

if TYPE_CHECKING:
    from casestatus.models.case_note import CaseNote


class ImmigrationCase(Base):
    """Public case-status record, looked up by registration number + nationality."""

    __tablename__ = "immigration_cases"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # Identity of the respondent
    registration_number: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        unique=True,
        index=True,
    )
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    nationality: Mapped[str] = mapped_column(String(2), nullable=False)

    # Appeal
    cause_list_date: Mapped[date | None] = mapped_column(nullable=True)
    appeal_received_date: Mapped[date | None] = mapped_column(nullable=True)
    appeal_status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=DEFAULT_APPEAL_STATUS,
        index=True,
    )
    brief_status_respondent: Mapped[str | None] = mapped_column(Text, nullable=True)
    brief_status_dhs: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Court
    court_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    court_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Hearings
    next_hearing_date: Mapped[date | None] = mapped_column(nullable=True, index=True)
    next_hearing_info: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Decision
    judicial_decision: Mapped[str | None] = mapped_column(Text, nullable=True)
    decision_date: Mapped[date | None] = mapped_column(nullable=True)
    decision_court_address: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=now_utc)
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc,
        onupdate=now_utc,
    )

    notes: Mapped[list["CaseNote"]] = relationship(
        "CaseNote",
        back_populates="case",
        cascade="all, delete-orphan",
        order_by="CaseNote.created_at.desc()",
    )

    __table_args__ = (
        Index("ix_immigration_cases_lookup", "registration_number", "nationality"),
    )

    def __repr__(self) -> str:
        return (
            f"<ImmigrationCase(registration_number={self.registration_number}, "
            f"nationality={self.nationality}, appeal_status={self.appeal_status})>"
        )
