from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..access.guard import AccessGuard
from ..access.identity import Identity
from ..common.validators import require_positive_int
from ..core.enums import Role
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..subjects.repository import SubjectRepository
from ..users.model import StudentProfile
from ..users.repository import UserRepository
from .model import StreamEnrollmentResult
from .repository import EnrollmentRepository

logger = logging.getLogger(__name__)

NO_SUBJECTS_MESSAGE = "No subjects found in this stream. Please add subjects first."
ALREADY_IN_STREAM_MESSAGE = "Student is already enrolled in all subjects of this stream"
ALREADY_IN_SUBJECT_MESSAGE = "Student is already enrolled in this subject"


class EnrollmentService:
    """Keeps subject enrollments consistent with streams.

    Enrolling into a stream means one enrollment per subject the stream has
    right now; subjects added later are not picked up automatically.
    """

    def __init__(
        self,
        enrollments: EnrollmentRepository,
        subjects: SubjectRepository,
        users: UserRepository,
        guard: AccessGuard,
    ):
        self._enrollments = enrollments
        self._subjects = subjects
        self._users = users
        self._guard = guard

    def _require_student(self, student_id: Any) -> int:
        student_id = require_positive_int(student_id, "Student ID")
        user = self._users.get_by_id(student_id)
        if not user or user.role != Role.STUDENT:
            raise NotFoundError("Student not found")
        return student_id

    def enroll_in_stream(self, identity: Optional[Identity], stream_id: int, student_id: Any) -> StreamEnrollmentResult:
        if student_id in (None, ""):
            raise ValidationError("Student ID is required")
        stream = self._guard.require_stream_owner(identity, stream_id)
        student_id = self._require_student(student_id)

        subjects = self._subjects.list_for_stream(stream.id)
        if not subjects:
            raise ValidationError(NO_SUBJECTS_MESSAGE)

        held = self._enrollments.subject_ids_in_stream(student_id=student_id, stream_id=stream.id)
        created: list[int] = []
        for subject in subjects:
            if subject.id in held:
                continue
            enrollment_id = self._enrollments.create(student_id=student_id, subject_id=subject.id)
            # None: a concurrent request enrolled the pair first.
            if enrollment_id is not None:
                created.append(enrollment_id)

        if not created:
            raise ConflictError(ALREADY_IN_STREAM_MESSAGE)

        logger.info("Enrolled student %s into %s subject(s) of stream %s", student_id, len(created), stream.id)
        return StreamEnrollmentResult(stream_id=stream.id, student_id=student_id, enrollment_ids=created)

    def unenroll_from_stream(self, identity: Optional[Identity], stream_id: int, student_id: int) -> int:
        stream = self._guard.require_stream_owner(identity, stream_id)
        removed = self._enrollments.delete_for_stream(student_id=int(student_id), stream_id=stream.id)
        logger.info("Removed %s enrollment(s) of student %s from stream %s", removed, student_id, stream.id)
        return removed

    def enroll_in_subject(self, identity: Optional[Identity], subject_id: int, student_id: Any) -> int:
        if student_id in (None, ""):
            raise ValidationError("Student ID is required")
        subject, _ = self._guard.require_subject_owner(identity, subject_id)
        student_id = self._require_student(student_id)

        enrollment_id = self._enrollments.create(student_id=student_id, subject_id=subject.id)
        if enrollment_id is None:
            raise ConflictError(ALREADY_IN_SUBJECT_MESSAGE)
        return enrollment_id

    def unenroll_from_subject(self, identity: Optional[Identity], subject_id: int, student_id: int) -> None:
        # Attendance rows for the pair are kept; they just stop being reachable
        # through enrollment checks.
        subject, _ = self._guard.require_subject_owner(identity, subject_id)
        if not self._enrollments.delete(student_id=int(student_id), subject_id=subject.id):
            raise NotFoundError("Student is not enrolled in this subject")

    def students_in_stream(self, identity: Optional[Identity], stream_id: int) -> Sequence[StudentProfile]:
        stream = self._guard.require_stream_owner(identity, stream_id)
        return self._enrollments.list_students_in_stream(stream.id)

    def students_in_subject(self, identity: Optional[Identity], subject_id: int) -> Sequence[StudentProfile]:
        subject, _ = self._guard.require_subject_owner(identity, subject_id)
        return self._enrollments.list_students_in_subject(subject.id)

    def available_for_stream(self, identity: Optional[Identity], stream_id: Optional[int]) -> Sequence[StudentProfile]:
        if stream_id is None:
            raise ValidationError("Stream ID is required")
        stream = self._guard.require_stream_owner(identity, stream_id)
        return self._enrollments.list_available_for_stream(stream.id)

    def available_for_subject(self, identity: Optional[Identity], subject_id: Optional[int]) -> Sequence[StudentProfile]:
        if subject_id is None:
            raise ValidationError("Subject ID is required")
        subject, _ = self._guard.require_subject_owner(identity, subject_id)
        return self._enrollments.list_available_for_subject(subject.id)
