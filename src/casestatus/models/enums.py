"""
Enums for domain models.
Enums provide type safety and clarity. Validation for categorical fields.
"""

import enum


class AdminRole(str, enum.Enum):
    """Administrator profile roles."""

    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class AuditAction(str, enum.Enum):
    """Actions recorded in the admin audit log."""

    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    CREATE_CASE = "CREATE_CASE"
    UPDATE_CASE = "UPDATE_CASE"
    UPDATE_CASE_STATUS = "UPDATE_CASE_STATUS"
    DELETE_CASE = "DELETE_CASE"
    ADD_NOTE = "ADD_NOTE"
    GENERATE_REPORT = "GENERATE_REPORT"


class ResourceType(str, enum.Enum):
    """Resource kinds referenced by audit entries."""

    AUTH = "AUTH"
    IMMIGRATION_CASE = "IMMIGRATION_CASE"
    PDF_REPORT = "PDF_REPORT"


class ReportType(str, enum.Enum):
    """PDF reports offered on the dashboard."""

    CASES_SUMMARY = "cases-summary"
    CASES_DETAILED = "cases-detailed"
    HEARINGS_SCHEDULE = "hearings-schedule"
    STATISTICS = "statistics"


# Stored appeal_status is free text; these are the values the editor offers.
DEFAULT_APPEAL_STATUS = "pending"
ACTIVE_STATUS_PATTERNS = ("%pending%", "%in_review%")
COMPLETED_STATUS_PATTERN = "%approved%"
REJECTED_STATUS_PATTERN = "%rejected%"
