from __future__ import annotations

from typing import Optional, Protocol, Sequence, Set

from ..users.model import StudentProfile


class EnrollmentRepository(Protocol):
    def create(self, *, student_id: int, subject_id: int) -> Optional[int]:
        """Insert the pair; returns None when it already exists."""

        raise NotImplementedError

    def delete(self, *, student_id: int, subject_id: int) -> bool:
        raise NotImplementedError

    def delete_for_stream(self, *, student_id: int, stream_id: int) -> int:
        raise NotImplementedError

    def exists(self, *, student_id: int, subject_id: int) -> bool:
        raise NotImplementedError

    def subject_ids_in_stream(self, *, student_id: int, stream_id: int) -> Set[int]:
        raise NotImplementedError

    def list_students_in_stream(self, stream_id: int) -> Sequence[StudentProfile]:
        raise NotImplementedError

    def list_students_in_subject(self, subject_id: int) -> Sequence[StudentProfile]:
        raise NotImplementedError

    def list_available_for_stream(self, stream_id: int) -> Sequence[StudentProfile]:
        raise NotImplementedError

    def list_available_for_subject(self, subject_id: int) -> Sequence[StudentProfile]:
        raise NotImplementedError
