from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, MarkEntry


class AttendanceRepository(Protocol):
    def list_for_student(
        self,
        student_id: int,
        *,
        subject_id: Optional[int] = None,
        stream_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """All records of the student, newest first, with `subject_name` filled in."""

        raise NotImplementedError

    def upsert_many(self, *, subject_id: int, on_date: date, entries: Sequence[MarkEntry]) -> int:
        """Write one status per student for the day in a single transaction."""

        raise NotImplementedError

    def list_for_subject(
        self,
        subject_id: int,
        *,
        on_date: Optional[date] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[dict]:
        raise NotImplementedError

    def count_for_subject(
        self,
        subject_id: int,
        *,
        on_date: Optional[date] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> int:
        raise NotImplementedError
