# File: src/casestatus/api/routes/public.py
"""Public pages: home with lookup form and case information."""

from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from casestatus.api.utils import render
from casestatus.core.case_resolver import resolve_case
from casestatus.core.collaborators import SqlCaseRepository
from casestatus.core.db import get_db
from casestatus.models.case_schemas import CaseQuery, Found

router = APIRouter(tags=["public"])

CASE_NOT_FOUND = "case-not-found"


def get_case_repository(db: AsyncSession = Depends(get_db)) -> SqlCaseRepository:
    """Case-data collaborator for the current request."""
    return SqlCaseRepository(db)


def not_found_url(query: CaseQuery) -> str:
    """Home page URL that re-displays the caller's query in the error banner."""
    params = urlencode(
        {
            "error": CASE_NOT_FOUND,
            "registration": query.registration_number,
            "nationality": query.nationality,
        }
    )
    return f"/?{params}"


@router.get("/", response_class=HTMLResponse)
async def home(
    request: Request,
    error: str | None = Query(None),
    registration: str | None = Query(None),
    nationality: str | None = Query(None),
):
    """Home page with the lookup form."""
    not_found = None
    if error == CASE_NOT_FOUND:
        not_found = {"registration": registration or "", "nationality": nationality or ""}

    return render(request, "home.html", {"not_found": not_found})


@router.get("/case-information", response_class=HTMLResponse)
async def case_information(
    request: Request,
    registration: str | None = Query(None),
    nationality: str | None = Query(None),
    cases: SqlCaseRepository = Depends(get_case_repository),
):
    """Look up a case by registration number AND nationality."""
    if not registration or not nationality:
        return RedirectResponse(url="/", status_code=302)

    query = CaseQuery(registration_number=registration, nationality=nationality)
    result = await resolve_case(query, cases)

    if not isinstance(result, Found):
        return RedirectResponse(url=not_found_url(result.query), status_code=302)

    return render(request, "case_information.html", {"case": result.record})
