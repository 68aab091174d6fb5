from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one dated presence status for a student in a subject."""

    id: int
    student_id: int
    subject_id: int
    date: date
    status: AttendanceStatus
    subject_name: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        out = {
            "id": self.id,
            "student_id": self.student_id,
            "subject_id": self.subject_id,
            "status": self.status.value,
            "date": self.date.isoformat(),
        }
        if self.subject_name is not None:
            out["subject_name"] = self.subject_name
        return out


@dataclass(frozen=True)
class AttendanceStats:
    total: int = 0
    present: int = 0
    absent: int = 0
    late: int = 0
    percentage: int = 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class AttendanceSummary:
    records: Sequence[AttendanceRecord] = field(default_factory=tuple)
    stats: AttendanceStats = field(default_factory=AttendanceStats)

    def to_dict(self) -> dict:
        return {
            "records": [r.to_dict() for r in self.records],
            "stats": self.stats.to_dict(),
        }


@dataclass(frozen=True)
class MarkEntry:
    student_id: int
    status: AttendanceStatus
