from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Any, Optional, Tuple

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError("Date must be in YYYY-MM-DD format")


def as_date(value: Any) -> date:
    """Coerce a driver value (date, datetime or ISO string) into a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value)[:10])


def period_bounds(*, month: Optional[int], year: Optional[int]) -> Optional[Tuple[date, date]]:
    """First and last day of the month (or of the year when month is absent).

    Month without a year is ignored.
    """
    if year is None:
        return None
    if month is None:
        return date(year, 1, 1), date(year, 12, 31)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)
