from __future__ import annotations

from datetime import datetime, time
from typing import Any, List, Optional

from ..access.guard import require_role
from ..access.identity import Identity
from ..attendance.aggregation import attendance_percentage
from ..common.datetime_utils import as_date, period_bounds
from ..core.constants import ACTIVITY_FEED_SIZE, ACTIVITY_QUERY_LIMIT
from ..core.enums import Role
from .model import ActivityItem
from .repository import DashboardRepository


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(as_date(value), time.min)


class DashboardService:
    def __init__(self, dashboard: DashboardRepository):
        self._dashboard = dashboard

    def teacher_stats(self, identity: Optional[Identity]) -> dict:
        identity = require_role(identity, Role.TEACHER)
        return self._dashboard.teacher_counts(identity.user_id)

    def student_stats(self, identity: Optional[Identity]) -> dict:
        identity = require_role(identity, Role.STUDENT)
        counts = self._dashboard.student_counts(identity.user_id)
        return {
            "streamCount": counts["streamCount"],
            "subjectCount": counts["subjectCount"],
            "attendancePercentage": attendance_percentage(attended=counts["attended"], total=counts["total"]),
        }

    def teacher_activity(
        self,
        identity: Optional[Identity],
        *,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> List[ActivityItem]:
        """Recent events under the teacher's streams, newest first.

        Attendance events are dated by the day they refer to; the others by
        when the row was created.
        """
        identity = require_role(identity, Role.TEACHER)
        bounds = period_bounds(month=month, year=year)
        start, end = bounds if bounds else (None, None)
        window = {"start": start, "end": end, "limit": ACTIVITY_QUERY_LIMIT}
        teacher_id = identity.user_id

        items: List[ActivityItem] = []
        for r in self._dashboard.recent_attendance(teacher_id, **window):
            items.append(
                ActivityItem(
                    type="attendance",
                    id=int(r["id"]),
                    occurred_at=_as_datetime(r["date"]),
                    description=f"Marked {r['student_name']} as {r['status']} in {r['subject_name']}",
                    link=f"/teacher/subjects/{r['subject_id']}/attendance",
                )
            )
        for r in self._dashboard.recent_enrollments(teacher_id, **window):
            items.append(
                ActivityItem(
                    type="enrollment",
                    id=int(r["id"]),
                    occurred_at=_as_datetime(r["created_at"]),
                    description=f"Enrolled {r['student_name']} in {r['subject_name']}",
                    link=f"/teacher/subjects/{r['subject_id']}/students",
                )
            )
        for r in self._dashboard.recent_subjects(teacher_id, **window):
            items.append(
                ActivityItem(
                    type="subject",
                    id=int(r["id"]),
                    occurred_at=_as_datetime(r["created_at"]),
                    description=f"Created subject {r['name']} in {r['stream_name']}",
                    link=f"/teacher/subjects/{r['id']}",
                )
            )
        for r in self._dashboard.recent_streams(teacher_id, **window):
            items.append(
                ActivityItem(
                    type="stream",
                    id=int(r["id"]),
                    occurred_at=_as_datetime(r["created_at"]),
                    description=f"Created stream {r['name']}",
                    link=f"/teacher/streams/{r['id']}",
                )
            )

        items.sort(key=lambda item: item.occurred_at, reverse=True)
        return items[:ACTIVITY_FEED_SIZE]
