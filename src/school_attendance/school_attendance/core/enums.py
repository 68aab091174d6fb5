from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    STUDENT = "student"
    TEACHER = "teacher"


class AttendanceStatus(str, Enum):
    """Attendance status values as stored in the database."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
