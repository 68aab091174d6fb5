"""Pure helpers for filtering attendance rows and computing stats."""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceStats, AttendanceSummary


def attendance_percentage(*, attended: int, total: int) -> int:
    """round(100 * attended / total), half-up; 0 when there is nothing to count."""
    if total <= 0:
        return 0
    return int(math.floor(100 * attended / total + 0.5))


def filter_by_period(
    records: Iterable[AttendanceRecord],
    *,
    month: Optional[int] = None,
    year: Optional[int] = None,
) -> List[AttendanceRecord]:
    # A month without a year is ignored.
    if year is None:
        return list(records)
    if month is None:
        return [r for r in records if r.date.year == year]
    return [r for r in records if r.date.year == year and r.date.month == month]


def newest_first(records: Iterable[AttendanceRecord]) -> List[AttendanceRecord]:
    return sorted(records, key=lambda r: (r.date, r.id), reverse=True)


def apply_limit(records: Sequence[AttendanceRecord], limit: Optional[int]) -> List[AttendanceRecord]:
    if limit and limit > 0:
        return list(records[:limit])
    return list(records)


def compute_stats(records: Iterable[AttendanceRecord]) -> AttendanceStats:
    present = absent = late = 0
    for r in records:
        if r.status == AttendanceStatus.PRESENT:
            present += 1
        elif r.status == AttendanceStatus.ABSENT:
            absent += 1
        elif r.status == AttendanceStatus.LATE:
            late += 1
    total = present + absent + late
    return AttendanceStats(
        total=total,
        present=present,
        absent=absent,
        late=late,
        percentage=attendance_percentage(attended=present + late, total=total),
    )


def summarize(
    records: Iterable[AttendanceRecord],
    *,
    month: Optional[int] = None,
    year: Optional[int] = None,
    limit: Optional[int] = None,
) -> AttendanceSummary:
    """Filter, order newest-first, cut to `limit`, then count what is left."""
    selected = apply_limit(newest_first(filter_by_period(records, month=month, year=year)), limit)
    return AttendanceSummary(records=tuple(selected), stats=compute_stats(selected))
