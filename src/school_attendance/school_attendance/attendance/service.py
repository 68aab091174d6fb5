from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Optional, Sequence

from ..access.guard import AccessGuard, require_role
from ..access.identity import Identity
from ..common.datetime_utils import parse_iso_date, period_bounds
from ..common.validators import require_positive_int
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..enrollments.repository import EnrollmentRepository
from ..streams.repository import StreamRepository
from ..subjects.repository import SubjectRepository
from .aggregation import apply_limit, compute_stats, newest_first, summarize
from .model import AttendanceSummary, MarkEntry
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _parse_entries(records: Any) -> list[MarkEntry]:
    if not isinstance(records, list) or not records:
        raise ValidationError("Invalid attendance data")

    entries: list[MarkEntry] = []
    seen: set[int] = set()
    for item in records:
        if not isinstance(item, Mapping):
            raise ValidationError("Invalid attendance data")
        student_id = require_positive_int(item.get("student_id"), "Student ID")
        try:
            status = AttendanceStatus(item.get("status"))
        except ValueError:
            raise ValidationError(f"Invalid status for student {student_id}")
        if student_id in seen:
            raise ValidationError(f"Duplicate record for student {student_id}")
        seen.add(student_id)
        entries.append(MarkEntry(student_id=student_id, status=status))
    return entries


class StudentAttendanceService:
    """Read side for students: filtered records plus stats."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        streams: StreamRepository,
        subjects: SubjectRepository,
        guard: AccessGuard,
    ):
        self._attendance = attendance
        self._streams = streams
        self._subjects = subjects
        self._guard = guard

    def overall(
        self,
        identity: Optional[Identity],
        *,
        month: Optional[int] = None,
        year: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> AttendanceSummary:
        identity = require_role(identity, Role.STUDENT)
        records = self._attendance.list_for_student(identity.user_id)
        return summarize(records, month=month, year=year, limit=limit)

    def for_stream(
        self,
        identity: Optional[Identity],
        stream_id: int,
        *,
        month: Optional[int] = None,
        year: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> dict:
        stream = self._guard.require_stream_member(identity, stream_id)
        details = self._streams.get_with_teacher(stream.id)
        if not details:
            raise NotFoundError("Stream not found")

        records = self._attendance.list_for_student(identity.user_id, stream_id=stream.id)
        summary = summarize(records, month=month, year=year, limit=limit)
        subjects = [
            {"id": s["id"], "name": s["name"], "description": s.get("description")}
            for s in self._subjects.list_in_stream_for_student(student_id=identity.user_id, stream_id=stream.id)
            if s.get("enrolled")
        ]

        out = summary.to_dict()
        out["stream"] = details
        out["subjects"] = subjects
        return out

    def for_subject(
        self,
        identity: Optional[Identity],
        subject_id: int,
        *,
        limit: Optional[int] = None,
    ) -> AttendanceSummary:
        subject = self._guard.require_subject_member(identity, subject_id)
        records = list(self._attendance.list_for_student(identity.user_id, subject_id=subject.id))
        # Stats cover every record in the subject; limit only trims the list.
        return AttendanceSummary(
            records=tuple(apply_limit(newest_first(records), limit)),
            stats=compute_stats(records),
        )


class TeacherAttendanceService:
    """Marking and paginated listing for a teacher's own subjects."""

    def __init__(self, attendance: AttendanceRepository, enrollments: EnrollmentRepository, guard: AccessGuard):
        self._attendance = attendance
        self._enrollments = enrollments
        self._guard = guard

    def mark(self, identity: Optional[Identity], subject_id: int, data: Mapping[str, Any]) -> int:
        subject, _ = self._guard.require_subject_owner(identity, subject_id)

        if not data.get("date"):
            raise ValidationError("Invalid attendance data")
        on_date = parse_iso_date(data.get("date"))
        entries = _parse_entries(data.get("records"))

        for entry in entries:
            if not self._enrollments.exists(student_id=entry.student_id, subject_id=subject.id):
                raise ValidationError(f"Student {entry.student_id} is not enrolled in this subject")

        written = self._attendance.upsert_many(subject_id=subject.id, on_date=on_date, entries=entries)
        logger.info("Marked %s attendance record(s) for subject %s on %s", written, subject.id, on_date)
        return written

    def list_for_subject(
        self,
        identity: Optional[Identity],
        subject_id: int,
        *,
        on_date: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> dict:
        subject, _ = self._guard.require_subject_owner(identity, subject_id)

        page = page or 1
        page_size = page_size or DEFAULT_PAGE_SIZE

        # A specific date wins over month/year.
        day = parse_iso_date(on_date) if on_date else None
        bounds = None if day else period_bounds(month=month, year=year)
        start, end = bounds if bounds else (None, None)

        total = self._attendance.count_for_subject(subject.id, on_date=day, start=start, end=end)
        records: Sequence[dict] = self._attendance.list_for_subject(
            subject.id,
            on_date=day,
            start=start,
            end=end,
            limit=page_size,
            offset=(page - 1) * page_size,
        )
        return {
            "records": list(records),
            "pagination": {
                "total": total,
                "page": page,
                "pageSize": page_size,
                "totalPages": math.ceil(total / page_size),
            },
        }
