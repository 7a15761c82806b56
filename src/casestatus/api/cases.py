# File: src/casestatus/api/cases.py
"""Case management API for administrators (CRUD, status editor, notes)."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from casestatus.api.auth_helpers import require_admin
from casestatus.core.audit import diff_values, load_case_history, log_admin_action
from casestatus.core.db import get_db
from casestatus.core.errors import ConflictError, NotFoundError
from casestatus.core.logging import get_logger
from casestatus.core.stats import invalidate_stats
from casestatus.models.admin_schemas import AdminUserRead
from casestatus.models.case_note import CaseNote
from casestatus.models.case_schemas import (
    CaseCreate,
    CaseNoteCreate,
    CaseNoteRead,
    CaseRead,
    CaseStatusUpdate,
    CaseUpdate,
)
from casestatus.models.enums import AuditAction, ResourceType
from casestatus.models.immigration_case import ImmigrationCase
from casestatus.models.report_schemas import CaseHistoryEntry

logger = get_logger(__name__)

router = APIRouter(prefix="/admin/api/cases", tags=["cases"])


async def get_case_or_404(db: AsyncSession, case_id: UUID) -> ImmigrationCase:
    result = await db.execute(select(ImmigrationCase).where(ImmigrationCase.id == case_id))
    case = result.scalar_one_or_none()
    if case is None:
        raise NotFoundError("ImmigrationCase", str(case_id))
    return case


async def _ensure_registration_available(
    db: AsyncSession, registration_number: str, exclude_id: UUID | None = None
) -> None:
    stmt = select(ImmigrationCase.id).where(
        ImmigrationCase.registration_number == registration_number
    )
    if exclude_id is not None:
        stmt = stmt.where(ImmigrationCase.id != exclude_id)
    result = await db.execute(stmt)
    if result.first() is not None:
        raise ConflictError(
            f"A case with registration number {registration_number} already exists",
            details={"registration_number": registration_number},
        )


async def _apply_changes(
    db: AsyncSession,
    case: ImmigrationCase,
    changes: dict,
) -> dict:
    """Set changed attributes, flush, and return the audit diff."""
    old_values = {field: getattr(case, field) for field in changes}
    for field, value in changes.items():
        setattr(case, field, value)

    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        raise ConflictError("Case update conflicts with an existing record") from exc

    await db.refresh(case)
    return diff_values(old_values, changes)


@router.get("", response_model=list[CaseRead])
async def list_cases(
    search: str | None = Query(None, max_length=200),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    admin: AdminUserRead = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[CaseRead]:
    """List cases, newest first, optionally filtered by registration number or name."""
    stmt = select(ImmigrationCase).order_by(ImmigrationCase.created_at.desc())
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(
                ImmigrationCase.registration_number.ilike(pattern),
                ImmigrationCase.full_name.ilike(pattern),
            )
        )
    result = await db.execute(stmt.limit(limit).offset(offset))
    return [CaseRead.model_validate(case) for case in result.scalars().all()]


@router.post("", response_model=CaseRead, status_code=status.HTTP_201_CREATED)
async def create_case(
    payload: CaseCreate,
    admin: AdminUserRead = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> CaseRead:
    """Create a case. Registration numbers are unique."""
    await _ensure_registration_available(db, payload.registration_number)

    case = ImmigrationCase(**payload.model_dump())
    db.add(case)
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        raise ConflictError(
            f"A case with registration number {payload.registration_number} already exists"
        ) from exc
    await db.refresh(case)

    await log_admin_action(
        db,
        admin.id,
        AuditAction.CREATE_CASE,
        ResourceType.IMMIGRATION_CASE,
        resource_id=str(case.id),
        details={"registration_number": case.registration_number, "case_name": case.full_name},
    )
    invalidate_stats()
    logger.info("case.created", case_id=str(case.id), admin_id=admin.id)
    return CaseRead.model_validate(case)


@router.get("/{case_id}", response_model=CaseRead)
async def get_case(
    case_id: UUID,
    admin: AdminUserRead = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> CaseRead:
    return CaseRead.model_validate(await get_case_or_404(db, case_id))


@router.patch("/{case_id}", response_model=CaseRead)
async def update_case(
    case_id: UUID,
    payload: CaseUpdate,
    admin: AdminUserRead = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> CaseRead:
    """Partial update from the case management screen."""
    case = await get_case_or_404(db, case_id)
    changes = payload.model_dump(exclude_unset=True)

    if changes.get("registration_number") is None:
        changes.pop("registration_number", None)
    else:
        await _ensure_registration_available(db, changes["registration_number"], exclude_id=case.id)
    for required in ("full_name", "nationality", "appeal_status"):
        if required in changes and changes[required] is None:
            changes.pop(required)

    diff = await _apply_changes(db, case, changes)

    await log_admin_action(
        db,
        admin.id,
        AuditAction.UPDATE_CASE,
        ResourceType.IMMIGRATION_CASE,
        resource_id=str(case.id),
        details={
            "case_name": case.full_name,
            "registration_number": case.registration_number,
            "changes": diff,
        },
    )
    invalidate_stats()
    logger.info("case.updated", case_id=str(case.id), fields=sorted(diff))
    return CaseRead.model_validate(case)


@router.patch("/{case_id}/status", response_model=CaseRead)
async def update_case_status(
    case_id: UUID,
    payload: CaseStatusUpdate,
    admin: AdminUserRead = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> CaseRead:
    """Status editor: appeal status, briefs, hearing and decision fields."""
    case = await get_case_or_404(db, case_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("appeal_status", "") is None:
        changes.pop("appeal_status")

    diff = await _apply_changes(db, case, changes)

    await log_admin_action(
        db,
        admin.id,
        AuditAction.UPDATE_CASE_STATUS,
        ResourceType.IMMIGRATION_CASE,
        resource_id=str(case.id),
        details={
            "case_name": case.full_name,
            "registration_number": case.registration_number,
            "appeal_status": case.appeal_status,
            "changes": diff,
        },
    )
    invalidate_stats()
    logger.info("case.status_updated", case_id=str(case.id), appeal_status=case.appeal_status)
    return CaseRead.model_validate(case)


@router.delete("/{case_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_case(
    case_id: UUID,
    admin: AdminUserRead = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> None:
    case = await get_case_or_404(db, case_id)
    registration_number = case.registration_number
    full_name = case.full_name

    await db.delete(case)
    await db.flush()

    await log_admin_action(
        db,
        admin.id,
        AuditAction.DELETE_CASE,
        ResourceType.IMMIGRATION_CASE,
        resource_id=str(case_id),
        details={
            "case_name": full_name,
            "registration_number": registration_number,
            "deleted_case_id": str(case_id),
        },
    )
    invalidate_stats()
    logger.info("case.deleted", case_id=str(case_id), admin_id=admin.id)


@router.get("/{case_id}/notes", response_model=list[CaseNoteRead])
async def list_case_notes(
    case_id: UUID,
    admin: AdminUserRead = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[CaseNoteRead]:
    await get_case_or_404(db, case_id)
    result = await db.execute(
        select(CaseNote).where(CaseNote.case_id == case_id).order_by(CaseNote.created_at.desc())
    )
    return [CaseNoteRead.model_validate(note) for note in result.scalars().all()]


@router.post("/{case_id}/notes", response_model=CaseNoteRead, status_code=status.HTTP_201_CREATED)
async def add_case_note(
    case_id: UUID,
    payload: CaseNoteCreate,
    admin: AdminUserRead = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> CaseNoteRead:
    case = await get_case_or_404(db, case_id)

    note = CaseNote(case_id=case.id, admin_id=UUID(admin.id), note=payload.note)
    db.add(note)
    await db.flush()
    await db.refresh(note)

    await log_admin_action(
        db,
        admin.id,
        AuditAction.ADD_NOTE,
        ResourceType.IMMIGRATION_CASE,
        resource_id=str(case.id),
        details={"registration_number": case.registration_number, "note_id": str(note.id)},
    )
    return CaseNoteRead.model_validate(note)


@router.get("/{case_id}/history", response_model=list[CaseHistoryEntry])
async def get_case_history(
    case_id: UUID,
    admin: AdminUserRead = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[CaseHistoryEntry]:
    """Who changed what on this case, newest first. Read-only."""
    await get_case_or_404(db, case_id)
    return await load_case_history(db, case_id)
