# File: src/casestatus/api/routes/admin.py
"""Admin HTML pages for case editing."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from casestatus.api.auth_helpers import require_admin
from casestatus.api.cases import get_case_or_404
from casestatus.api.utils import render
from casestatus.core.audit import load_case_history
from casestatus.core.db import get_db
from casestatus.models.admin_schemas import AdminUserRead
from casestatus.models.case_note import CaseNote

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/case-status/{case_id}", response_class=HTMLResponse)
async def case_status_page(
    request: Request,
    case_id: UUID,
    admin: AdminUserRead = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Render the case status editor, its notes and its change history."""
    case = await get_case_or_404(db, case_id)

    result = await db.execute(
        select(CaseNote).where(CaseNote.case_id == case.id).order_by(CaseNote.created_at.desc())
    )
    notes = result.scalars().all()
    history = await load_case_history(db, case.id)

    return render(
        request,
        "admin/case_status.html",
        {"admin": admin, "case": case, "notes": notes, "history": history},
    )
