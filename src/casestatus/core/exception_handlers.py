# File: src/casestatus/core/exception_handlers.py
"""Global exception handlers for FastAPI."""

from fastapi import Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from casestatus.core.errors import AppError
from casestatus.core.logging import get_logger

logger = get_logger(__name__)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """
    Handle all AppError exceptions and convert to JSON response.

    Returns standardized error format:
    {
        "code": "NOT_FOUND",
        "message": "ImmigrationCase with ID xyz not found",
        "details": {"resource": "ImmigrationCase", "resource_id": "xyz"}
    }
    """
    if exc.status_code >= 500:
        logger.error("app_error", code=exc.code, path=request.url.path)
    else:
        logger.info("app_error", code=exc.code, path=request.url.path)

    error_response = exc.to_response()
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(exclude_none=True),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with redirect support for the admin gate."""
    if (
        exc.status_code == status.HTTP_303_SEE_OTHER
        and exc.headers
        and "Location" in exc.headers
    ):
        return RedirectResponse(url=exc.headers["Location"], status_code=303)

    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=exc.headers,
    )


def register_exception_handlers(app) -> None:
    """Register all custom exception handlers with FastAPI app."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
