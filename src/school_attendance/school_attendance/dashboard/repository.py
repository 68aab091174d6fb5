from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence


class DashboardRepository(Protocol):
    def teacher_counts(self, teacher_id: int) -> dict:
        """`{streamCount, subjectCount, studentCount}` for the teacher's streams."""

        raise NotImplementedError

    def student_counts(self, student_id: int) -> dict:
        """`{streamCount, subjectCount, total, attended}`; attended = present + late."""

        raise NotImplementedError

    # Activity sources. Each returns at most `limit` rows, newest first.

    def recent_attendance(
        self, teacher_id: int, *, start: Optional[date], end: Optional[date], limit: int
    ) -> Sequence[dict]:
        raise NotImplementedError

    def recent_enrollments(
        self, teacher_id: int, *, start: Optional[date], end: Optional[date], limit: int
    ) -> Sequence[dict]:
        raise NotImplementedError

    def recent_subjects(
        self, teacher_id: int, *, start: Optional[date], end: Optional[date], limit: int
    ) -> Sequence[dict]:
        raise NotImplementedError

    def recent_streams(
        self, teacher_id: int, *, start: Optional[date], end: Optional[date], limit: int
    ) -> Sequence[dict]:
        raise NotImplementedError
