"""Audit logging utilities for administrator actions and the case history built on them."""

from datetime import date, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from casestatus.models.admin_audit_log import AdminAuditLog
from casestatus.models.admin_user import AdminUser
from casestatus.models.case_note import CaseNote
from casestatus.models.enums import AuditAction, ResourceType
from casestatus.models.report_schemas import CaseHistoryEntry
from casestatus.utils.datetime import now_utc


def _serialize_value(v: Any) -> Any:
    """Make values JSON-safe for the details column."""
    if isinstance(v, (date, datetime)):
        return v.isoformat()
    if isinstance(v, UUID):
        return str(v)
    return v


async def log_admin_action(
    db: AsyncSession,
    admin_id: str | UUID,
    action: AuditAction,
    resource_type: ResourceType,
    resource_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> AdminAuditLog:
    """Record an administrator action in the audit trail.

    Args:
        db: Database session (the caller commits)
        admin_id: Administrator performing the action
        action: What happened (LOGIN, UPDATE_CASE, ...)
        resource_type: AUTH, IMMIGRATION_CASE or PDF_REPORT
        resource_id: Case id or report type, when applicable
        details: Extra context, e.g. changed fields

    Returns:
        The pending AdminAuditLog row
    """
    entry = AdminAuditLog(
        admin_id=admin_id if isinstance(admin_id, UUID) else UUID(admin_id),
        action=action.value,
        resource_type=resource_type.value,
        resource_id=resource_id,
        details={k: _serialize_value(v) for k, v in (details or {}).items()},
        created_at=now_utc(),
    )

    db.add(entry)
    await db.flush()
    return entry


def diff_values(old_values: dict[str, Any], new_values: dict[str, Any]) -> dict[str, Any]:
    """Return {field: {"old": ..., "new": ...}} for fields whose value changed."""
    return {
        key: {"old": _serialize_value(old_values.get(key)), "new": _serialize_value(value)}
        for key, value in new_values.items()
        if old_values.get(key) != value
    }


def _as_text(value: Any) -> str | None:
    return None if value is None else str(value)


async def load_case_history(db: AsyncSession, case_id: UUID) -> list[CaseHistoryEntry]:
    """Read-only change history of one case, newest first.

    Each changed field of an update becomes its own entry; notes carry their text.
    """
    result = await db.execute(
        select(AdminAuditLog, AdminUser.full_name, AdminUser.email)
        .outerjoin(AdminUser, AdminUser.id == AdminAuditLog.admin_id)
        .where(
            AdminAuditLog.resource_type == ResourceType.IMMIGRATION_CASE.value,
            AdminAuditLog.resource_id == str(case_id),
        )
        .order_by(AdminAuditLog.created_at.desc())
    )
    rows = result.all()

    notes_result = await db.execute(select(CaseNote.id, CaseNote.note).where(CaseNote.case_id == case_id))
    note_text = {str(note_id): text for note_id, text in notes_result.all()}

    history: list[CaseHistoryEntry] = []
    for entry, admin_name, admin_email in rows:
        base = {
            "audit_id": entry.id,
            "action_type": entry.action,
            "admin_name": admin_name or None,
            "admin_email": admin_email,
            "created_at": entry.created_at,
        }
        changes = entry.details.get("changes") or {}
        if changes:
            for field_name in sorted(changes):
                change = changes[field_name]
                history.append(
                    CaseHistoryEntry(
                        **base,
                        field_changed=field_name,
                        old_value=_as_text(change.get("old")),
                        new_value=_as_text(change.get("new")),
                    )
                )
        else:
            history.append(
                CaseHistoryEntry(**base, notes=note_text.get(entry.details.get("note_id", "")))
            )
    return history
