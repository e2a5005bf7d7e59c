from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator, Union


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD (optionally followed by a time part) into a date."""
    return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()


def parse_month(value: str) -> date:
    """Parse YYYY-MM (a trailing day is ignored) into the first day of that month."""
    return datetime.strptime(str(value)[:7], "%Y-%m").date()


def iso_date(value: Union[date, datetime]) -> str:
    return value.strftime("%Y-%m-%d")


def month_start(value: Union[date, datetime]) -> date:
    return date(value.year, value.month, 1)


def month_end(value: Union[date, datetime]) -> date:
    start = month_start(value)
    following = (start.replace(day=28) + timedelta(days=4)).replace(day=1)
    return following - timedelta(days=1)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar day from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
