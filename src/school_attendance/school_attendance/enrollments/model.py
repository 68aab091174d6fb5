from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence


@dataclass(frozen=True)
class SubjectEnrollment:
    """Join record proving a student belongs to a subject."""

    id: int
    student_id: int
    subject_id: int
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class StreamEnrollmentResult:
    """Outcome of enrolling a student into every subject of a stream."""

    stream_id: int
    student_id: int
    enrollment_ids: Sequence[int]
