from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Stream


class StreamRepository(Protocol):
    def get_by_id(self, stream_id: int) -> Optional[Stream]:
        raise NotImplementedError

    def create(self, *, name: str, description: Optional[str], teacher_id: int) -> int:
        raise NotImplementedError

    def update(self, stream_id: int, *, name: str, description: Optional[str]) -> bool:
        raise NotImplementedError

    def delete(self, stream_id: int) -> bool:
        raise NotImplementedError

    def count_subjects(self, stream_id: int) -> int:
        raise NotImplementedError

    def count_students(self, stream_id: int) -> int:
        """Distinct students holding at least one enrollment under the stream."""

        raise NotImplementedError

    def list_for_teacher(self, teacher_id: int) -> Sequence[dict]:
        """Teacher's streams with `subjectCount` and `studentCount`, newest first."""

        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[dict]:
        """Streams the student belongs to, with teacher name and subject counts."""

        raise NotImplementedError

    def get_with_teacher(self, stream_id: int) -> Optional[dict]:
        raise NotImplementedError
