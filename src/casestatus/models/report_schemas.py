"""Pydantic schemas for PDF reports and case history."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from casestatus.models.admin_schemas import DashboardStats
from casestatus.models.case_schemas import CaseRead
from casestatus.models.enums import ReportType


class StatusCount(BaseModel):
    appeal_status: str
    count: int


class ReportData(BaseModel):
    """Everything one report template renders."""

    report_type: ReportType
    stats: DashboardStats
    cases: list[CaseRead] = Field(default_factory=list)
    cases_count: int = Field(0, description="Cases the report covers, before any listing limit")
    date_from: date | None = None
    date_to: date | None = None
    status_breakdown: list[StatusCount] = Field(default_factory=list)

    @property
    def date_range(self) -> dict[str, str | None] | None:
        if self.date_from is None and self.date_to is None:
            return None
        return {
            "from": self.date_from.isoformat() if self.date_from else None,
            "to": self.date_to.isoformat() if self.date_to else None,
        }


class CaseHistoryEntry(BaseModel):
    """One read-only line of a case's change history, taken from the audit trail."""

    audit_id: UUID
    action_type: str
    field_changed: str | None = None
    old_value: str | None = None
    new_value: str | None = None
    notes: str | None = None
    admin_name: str | None = None
    admin_email: str | None = None
    created_at: datetime
