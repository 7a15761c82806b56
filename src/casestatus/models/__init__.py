"""Domain models package."""

from casestatus.models.admin_audit_log import AdminAuditLog
from casestatus.models.admin_schemas import AdminUserRead, DashboardStats, IdentitySession
from casestatus.models.admin_user import AdminUser
from casestatus.models.case_note import CaseNote
from casestatus.models.case_schemas import (
    CaseCreate,
    CaseNoteCreate,
    CaseNoteRead,
    CaseQuery,
    CaseRead,
    CaseStatusUpdate,
    CaseUpdate,
    Found,
    LookupResult,
    NotFound,
)
from casestatus.models.enums import AdminRole, AuditAction, ResourceType
from casestatus.models.immigration_case import ImmigrationCase
from casestatus.models.user import User

__all__ = [
    "AdminAuditLog",
    "AdminRole",
    "AdminUser",
    "AdminUserRead",
    "AuditAction",
    "CaseCreate",
    "CaseNote",
    "CaseNoteCreate",
    "CaseNoteRead",
    "CaseQuery",
    "CaseRead",
    "CaseStatusUpdate",
    "CaseUpdate",
    "DashboardStats",
    "Found",
    "IdentitySession",
    "ImmigrationCase",
    "LookupResult",
    "NotFound",
    "ResourceType",
    "User",
]
