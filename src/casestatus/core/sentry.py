"""Optional Sentry reporting for backend outages hidden behind denials and misses."""

import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.utils import BadDsn

from casestatus.core.logging import get_logger

logger = get_logger(__name__)

# Set once sentry_sdk.init succeeds
_sentry_initialized = False

# Request fields that can carry a respondent's identity
_SENSITIVE_QUERY_KEYS = ("registration", "nationality")


def _configured_dsn() -> str | None:
    """SENTRY_DSN when it looks like a real DSN; None for blanks and placeholders."""
    dsn = (os.getenv("SENTRY_DSN") or "").strip()
    if not dsn:
        logger.info("sentry.disabled", reason="dsn_unset")
        return None
    if not dsn.startswith(("https://", "http://")):
        logger.info("sentry.disabled", reason="dsn_placeholder")
        return None
    return dsn


def init_sentry() -> None:
    """
    Turn on error tracking for collaborator outages and unhandled errors.

    Local development and CI leave SENTRY_DSN unset and run without it.
    Repeated calls are no-ops once the SDK is up.
    """
    global _sentry_initialized

    if _sentry_initialized:
        return

    dsn = _configured_dsn()
    if dsn is None:
        return

    environment = os.getenv("ENVIRONMENT", "development")
    try:
        sentry_sdk.init(
            dsn=dsn,
            environment=environment,
            send_default_pii=False,
            traces_sample_rate=0.0,
            before_send=_scrub_case_query,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                LoggingIntegration(level=None, event_level=None),  # structlog owns logs
            ],
        )
    except BadDsn as exc:
        logger.warning("sentry.disabled", reason="dsn_rejected", error=str(exc))
        return

    _sentry_initialized = True
    logger.info("sentry.initialized", environment=environment)


def is_enabled() -> bool:
    return _sentry_initialized


def capture_collaborator_error(exc: BaseException, **context) -> None:
    """Report a backend failure that was turned into a denial or a miss."""
    if not _sentry_initialized:
        return

    with sentry_sdk.new_scope() as scope:
        for key, value in context.items():
            scope.set_tag(key, value)
        sentry_sdk.capture_exception(exc)


def _scrub_case_query(event: dict, hint: dict) -> dict:
    """Drop registration numbers and nationalities from captured request URLs."""
    request = event.get("request")
    if isinstance(request, dict):
        query_string = request.get("query_string")
        if isinstance(query_string, str) and any(
            key in query_string for key in _SENSITIVE_QUERY_KEYS
        ):
            request["query_string"] = "[Filtered]"
    return event
