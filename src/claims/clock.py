"""UTC clock helpers."""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Current time as a tz-aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Current calendar date in UTC."""
    return utc_now().date()
