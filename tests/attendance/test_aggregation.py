from __future__ import annotations

from datetime import date

import pytest

from src.school_attendance.school_attendance.attendance.aggregation import (
    attendance_percentage,
    compute_stats,
    filter_by_period,
    summarize,
)
from src.school_attendance.school_attendance.attendance.model import AttendanceRecord
from src.school_attendance.school_attendance.core.enums import AttendanceStatus


def _rec(rid: int, day: date, status: AttendanceStatus = AttendanceStatus.PRESENT) -> AttendanceRecord:
    return AttendanceRecord(id=rid, student_id=1, subject_id=1, date=day, status=status)


def test_percentage_is_zero_without_records():
    assert attendance_percentage(attended=0, total=0) == 0
    assert compute_stats([]).percentage == 0


def test_late_counts_as_attended():
    records = [
        _rec(1, date(2024, 1, 1)),
        _rec(2, date(2024, 1, 2)),
        _rec(3, date(2024, 1, 3)),
        _rec(4, date(2024, 1, 4), AttendanceStatus.LATE),
        _rec(5, date(2024, 1, 5), AttendanceStatus.ABSENT),
    ]
    stats = compute_stats(records)
    assert (stats.total, stats.present, stats.late, stats.absent) == (5, 3, 1, 1)
    assert stats.percentage == 80


@pytest.mark.parametrize(
    "attended,total,expected",
    [
        (1, 8, 13),  # 12.5 rounds up
        (1, 3, 33),
        (2, 3, 67),
        (5, 8, 63),  # 62.5 rounds up
        (3, 3, 100),
    ],
)
def test_percentage_rounds_half_up(attended, total, expected):
    assert attendance_percentage(attended=attended, total=total) == expected


def test_month_and_year_filter():
    jan = _rec(1, date(2024, 1, 5))
    feb = _rec(2, date(2024, 2, 10))

    assert filter_by_period([jan, feb], month=1, year=2024) == [jan]
    assert filter_by_period([jan, feb], year=2024) == [jan, feb]
    assert filter_by_period([jan, feb], year=2023) == []


def test_month_without_year_is_ignored():
    records = [_rec(1, date(2024, 1, 5)), _rec(2, date(2024, 2, 10))]
    assert filter_by_period(records, month=1) == records


def test_summarize_orders_newest_first_and_limits_before_counting():
    records = [
        _rec(1, date(2024, 1, 1), AttendanceStatus.ABSENT),
        _rec(2, date(2024, 1, 3)),
        _rec(3, date(2024, 1, 2), AttendanceStatus.LATE),
    ]
    summary = summarize(records, limit=2)

    assert [r.id for r in summary.records] == [2, 3]
    assert summary.stats.total == 2
    assert summary.stats.absent == 0
    assert summary.stats.percentage == 100


def test_non_positive_limit_means_no_limit():
    records = [_rec(i, date(2024, 1, i)) for i in range(1, 4)]
    assert len(summarize(records, limit=0).records) == 3
