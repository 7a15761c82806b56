"""Datetime helpers for court-local dates and naive UTC storage."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

# Hearing dates are published in US Eastern time (EOIR headquarters)
APP_TIMEZONE = ZoneInfo("America/New_York")


def now_local() -> datetime:
    """Get current datetime in the court timezone."""
    return datetime.now(APP_TIMEZONE)


def today_local() -> date:
    """Get today's date in the court timezone."""
    return now_local().date()


def now_utc() -> datetime:
    """Get current UTC datetime as NAIVE for database storage."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
