# File: src/casestatus/api/routes/reports.py
"""Administrator PDF reports (cases summary, detailed, hearings schedule, statistics)."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from casestatus.api.auth_helpers import require_admin
from casestatus.api.utils import get_locale, get_translation_function, templates
from casestatus.core.audit import log_admin_action
from casestatus.core.db import get_db
from casestatus.core.errors import CollaboratorError
from casestatus.core.logging import get_logger
from casestatus.core.report_pdf import page_footer, render_pdf_from_html
from casestatus.core.reports import build_report, report_filename
from casestatus.core.sentry import capture_collaborator_error
from casestatus.models.admin_schemas import AdminUserRead
from casestatus.models.enums import AuditAction, ReportType, ResourceType
from casestatus.models.report_schemas import ReportData
from casestatus.utils.datetime import now_local, today_local

logger = get_logger(__name__)

router = APIRouter(prefix="/admin/api/reports", tags=["reports"])


def _parse_range(date_from: str | None, date_to: str | None) -> tuple[date | None, date | None]:
    """ISO dates from the query string; blank means unbounded."""
    try:
        start = date.fromisoformat(date_from) if date_from else None
        end = date.fromisoformat(date_to) if date_to else None
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Dates must be YYYY-MM-DD") from exc
    if start and end and start > end:
        raise HTTPException(status_code=400, detail="date_from must not be after date_to")
    return start, end


def _report_html(request: Request, report: ReportData, admin: AdminUserRead) -> str:
    locale = get_locale(request)
    return templates.get_template("admin/report.html").render(
        lang=locale,
        _=get_translation_function(locale),
        report=report,
        admin=admin,
        generated_at=now_local(),
    )


@router.get("/{report_type}/preview", response_class=HTMLResponse)
async def report_preview(
    request: Request,
    report_type: ReportType,
    date_from: str | None = Query(None),
    date_to: str | None = Query(None),
    admin: AdminUserRead = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """The report page exactly as it is printed to PDF."""
    start, end = _parse_range(date_from, date_to)
    report = await build_report(db, report_type, start, end)
    return HTMLResponse(_report_html(request, report, admin))


@router.get("/{report_type}")
async def download_report(
    request: Request,
    report_type: ReportType,
    date_from: str | None = Query(None),
    date_to: str | None = Query(None),
    admin: AdminUserRead = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Render a report to PDF, record GENERATE_REPORT and send it as a download."""
    start, end = _parse_range(date_from, date_to)
    report = await build_report(db, report_type, start, end)
    filename = report_filename(report_type, today_local())
    locale = get_locale(request)

    try:
        pdf_bytes = await render_pdf_from_html(
            html=_report_html(request, report, admin),
            locale=locale,
            footer_template=page_footer(locale),
        )
    except CollaboratorError as exc:
        capture_collaborator_error(exc, report_type=report_type.value)
        raise

    await log_admin_action(
        db,
        admin.id,
        AuditAction.GENERATE_REPORT,
        ResourceType.PDF_REPORT,
        resource_id=report_type.value,
        details={
            "report_type": report_type.value,
            "date_range": report.date_range,
            "cases_count": report.cases_count,
            "filename": filename,
        },
    )
    logger.info(
        "report.generated",
        report_type=report_type.value,
        admin_id=admin.id,
        cases_count=report.cases_count,
    )

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
