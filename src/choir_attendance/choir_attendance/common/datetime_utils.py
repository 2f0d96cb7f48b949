from __future__ import annotations

from datetime import date, datetime
from typing import Optional

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_optional_date(value) -> Optional[date]:
    """Accept a date, a YYYY-MM-DD string or an empty value."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value).strip())


def month_key(day: date) -> str:
    """Calendar month bucket, e.g. '2025-01'."""
    return f"{day.year:04d}-{day.month:02d}"


def format_day(day: date) -> str:
    """Day/month/year, the way attendance sheets print dates."""
    return day.strftime("%d/%m/%Y")


def now_local() -> datetime:
    """Current local time.

    Note: wrapped so tests can patch it.
    """
    return datetime.now()
