from __future__ import annotations

import calendar
import re
from datetime import date

from fastapi import HTTPException

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def parse_month(month: str | None, *, today: date | None = None) -> date:
    """Parse YYYY-MM into that month's first day; default to the current month."""
    if month is None:
        current = today or date.today()
        return date(current.year, current.month, 1)

    match = MONTH_PATTERN.match(month)
    if match is None:
        raise HTTPException(status_code=422, detail="Expected YYYY-MM")

    year, month_number = int(match.group(1)), int(match.group(2))
    if month_number < 1 or month_number > 12:
        raise HTTPException(status_code=422, detail="Expected YYYY-MM")

    return date(year, month_number, 1)


def month_start_end_exclusive(month_start: date) -> tuple[date, date]:
    """Build [month_start, next_month_start) boundaries."""
    return month_start, shift_months(month_start, 1)


def month_last_day(month_start: date) -> date:
    return date(month_start.year, month_start.month, calendar.monthrange(month_start.year, month_start.month)[1])


def month_label(month_start: date) -> str:
    """Render month start date as YYYY-MM."""
    return f"{month_start.year:04d}-{month_start.month:02d}"


def shift_months(month_start: date, offset: int) -> date:
    # Any day of the month maps onto the shifted month's first day.
    absolute_index = month_start.year * 12 + (month_start.month - 1) + offset
    year, month_zero_based = divmod(absolute_index, 12)
    return date(year, month_zero_based + 1, 1)


def list_month_starts(end_month_start: date, count: int) -> list[date]:
    """Return `count` month starts ending at `end_month_start`, oldest first."""
    if count < 1:
        return []

    oldest = shift_months(end_month_start, -(count - 1))
    return [shift_months(oldest, i) for i in range(count)]
