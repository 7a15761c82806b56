"""Pydantic schemas for identity sessions and administrator records."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator


class IdentitySession(BaseModel):
    """The caller's validated identity for the current request."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str | None = None

    @field_validator("user_id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, UUID) else v


class AdminUserRead(BaseModel):
    """Administrator record handed to the dashboard once access is granted."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str | None = None
    full_name: str = ""
    role: str = "admin"
    created_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, UUID) else v

    @property
    def display_name(self) -> str:
        return self.full_name.strip() or (self.email or self.id)


class DashboardStats(BaseModel):
    total_cases: int = 0
    active_cases: int = 0
    pending_cases: int = 0
    completed_cases: int = 0
    rejected_cases: int = 0
    scheduled_hearings: int = 0
    total_admins: int = 0
