"""Calendar helpers shared by the scheduler, due evaluator and review log."""

from datetime import date, datetime, timedelta, timezone


def add_days(day: date, days: int) -> date:
    """Calendar arithmetic: rolls across month and year boundaries."""
    return day + timedelta(days=days)


def format_day(day: date) -> str:
    """YYYY-MM-DD key used in payloads and the review log."""
    return day.isoformat()


def parse_day(value: str | date | None) -> date | None:
    """
    Parse a YYYY-MM-DD string (or a longer ISO timestamp) into a date.

    Time-of-day is discarded so comparisons stay at day granularity.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def format_timestamp(instant: datetime) -> str:
    """
    Render an instant as a UTC ISO string with millisecond precision.

    e.g. 2024-12-30T08:15:00.000Z
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    utc = instant.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"
