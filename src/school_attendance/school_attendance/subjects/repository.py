from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Subject


class SubjectRepository(Protocol):
    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        raise NotImplementedError

    def list_for_stream(self, stream_id: int) -> Sequence[Subject]:
        raise NotImplementedError

    def create(self, *, name: str, description: Optional[str], stream_id: int) -> int:
        raise NotImplementedError

    def update(self, subject_id: int, *, name: str, description: Optional[str]) -> bool:
        raise NotImplementedError

    def delete(self, subject_id: int) -> bool:
        raise NotImplementedError

    def count_students(self, subject_id: int) -> int:
        raise NotImplementedError

    def list_for_teacher(self, teacher_id: int) -> Sequence[dict]:
        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[dict]:
        raise NotImplementedError

    def list_in_stream_for_student(self, *, student_id: int, stream_id: int) -> Sequence[dict]:
        """All subjects of the stream with an `enrolled` flag for the student."""

        raise NotImplementedError
