"""Data gathering for the administrator PDF reports."""

from datetime import date, datetime, time, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from casestatus.core.stats import get_dashboard_stats
from casestatus.models.case_schemas import CaseRead
from casestatus.models.enums import ReportType
from casestatus.models.immigration_case import ImmigrationCase
from casestatus.models.report_schemas import ReportData, StatusCount

SUMMARY_CASES_LIMIT = 10

FILENAME_PREFIXES = {
    ReportType.CASES_SUMMARY: "resumen-casos",
    ReportType.CASES_DETAILED: "casos-detallados",
    ReportType.HEARINGS_SCHEDULE: "calendario-audiencias",
    ReportType.STATISTICS: "estadisticas",
}


def report_filename(report_type: ReportType, generated_on: date) -> str:
    return f"{FILENAME_PREFIXES[report_type]}-{generated_on:%Y-%m-%d}.pdf"


def _created_between(stmt, date_from: date | None, date_to: date | None):
    """Keep cases created from date_from through date_to, both inclusive (UTC days)."""
    if date_from is not None:
        stmt = stmt.where(ImmigrationCase.created_at >= datetime.combine(date_from, time.min))
    if date_to is not None:
        stmt = stmt.where(
            ImmigrationCase.created_at < datetime.combine(date_to + timedelta(days=1), time.min)
        )
    return stmt


async def build_report(
    db: AsyncSession,
    report_type: ReportType,
    date_from: date | None = None,
    date_to: date | None = None,
) -> ReportData:
    """
    Collect what one report shows.

    Only cases created in the date range are considered. Summary lists the
    newest few, detailed lists all of them, the hearings schedule lists those
    with a hearing date (earliest first), and statistics counts them per
    appeal status. Dashboard counters stay global, as on the dashboard.
    """
    stats = await get_dashboard_stats(db)
    report = ReportData(report_type=report_type, stats=stats, date_from=date_from, date_to=date_to)

    if report_type == ReportType.STATISTICS:
        result = await db.execute(
            _created_between(
                select(ImmigrationCase.appeal_status, func.count(ImmigrationCase.id)),
                date_from,
                date_to,
            ).group_by(ImmigrationCase.appeal_status)
        )
        breakdown = [StatusCount(appeal_status=status, count=count) for status, count in result.all()]
        report.status_breakdown = sorted(breakdown, key=lambda row: (-row.count, row.appeal_status))
        report.cases_count = sum(row.count for row in breakdown)
        return report

    stmt = _created_between(select(ImmigrationCase), date_from, date_to)
    if report_type == ReportType.HEARINGS_SCHEDULE:
        stmt = stmt.where(ImmigrationCase.next_hearing_date.is_not(None)).order_by(
            ImmigrationCase.next_hearing_date.asc(), ImmigrationCase.full_name.asc()
        )
    else:
        stmt = stmt.order_by(ImmigrationCase.created_at.desc())

    result = await db.execute(stmt)
    cases = [CaseRead.model_validate(case) for case in result.scalars().all()]
    report.cases_count = len(cases)
    report.cases = cases[:SUMMARY_CASES_LIMIT] if report_type == ReportType.CASES_SUMMARY else cases
    return report
