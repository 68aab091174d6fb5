from __future__ import annotations

from datetime import date, datetime

import pytest

from src.school_attendance.school_attendance.core.constants import ACTIVITY_FEED_SIZE
from src.school_attendance.school_attendance.core.enums import AttendanceStatus
from src.school_attendance.school_attendance.core.exceptions import AuthorizationError
from tests.fakes import identity_of


def test_teacher_stats(store, container):
    teacher = store.add_teacher()
    stream = store.add_stream(teacher)
    a = store.add_subject(stream, "A")
    b = store.add_subject(stream, "B")
    student = store.add_student()
    store.enroll(student, a)
    store.enroll(student, b)
    store.add_stream(store.add_teacher())

    stats = container.dashboard_service.teacher_stats(identity_of(teacher))

    assert stats == {"streamCount": 1, "subjectCount": 2, "studentCount": 1}


def test_student_stats(store, container):
    teacher = store.add_teacher()
    subject = store.add_subject(store.add_stream(teacher))
    student = store.add_student()
    store.enroll(student, subject)
    store.mark(student, subject, date(2024, 1, 1), AttendanceStatus.PRESENT)
    store.mark(student, subject, date(2024, 1, 2), AttendanceStatus.LATE)
    store.mark(student, subject, date(2024, 1, 3), AttendanceStatus.ABSENT)

    stats = container.dashboard_service.student_stats(identity_of(student))

    assert stats == {"streamCount": 1, "subjectCount": 1, "attendancePercentage": 67}


def test_stats_are_role_scoped(store, container):
    with pytest.raises(AuthorizationError):
        container.dashboard_service.teacher_stats(identity_of(store.add_student()))
    with pytest.raises(AuthorizationError):
        container.dashboard_service.student_stats(identity_of(store.add_teacher()))


def test_activity_is_merged_newest_first(store, container, fixed_now):
    teacher = store.add_teacher()
    stream = store.add_stream(teacher, "Science")
    subject = store.add_subject(stream, "Physics")
    student = store.add_student("Alice")
    store.enroll(student, subject)
    store.mark(student, subject, date(2024, 3, 5), AttendanceStatus.LATE)

    items = container.dashboard_service.teacher_activity(identity_of(teacher))

    assert items[0].type == "attendance"
    assert items[0].description == "Marked Alice as late in Physics"
    assert items[0].occurred_at == datetime(2024, 3, 5)
    assert {i.type for i in items} == {"attendance", "enrollment", "subject", "stream"}
    assert all(i.occurred_at <= items[0].occurred_at for i in items)
    assert items[0].to_dict()["link"] == f"/teacher/subjects/{subject.id}/attendance"
    assert items[-1].occurred_at == fixed_now


def test_activity_period_filter(store, container):
    teacher = store.add_teacher()
    subject = store.add_subject(store.add_stream(teacher))
    student = store.add_student()
    store.mark(student, subject, date(2023, 12, 31), AttendanceStatus.PRESENT)

    items = container.dashboard_service.teacher_activity(identity_of(teacher), month=12, year=2023)

    assert [i.type for i in items] == ["attendance"]


def test_activity_feed_is_capped(store, container):
    teacher = store.add_teacher()
    subject = store.add_subject(store.add_stream(teacher))
    student = store.add_student()
    for day in range(1, 21):
        store.mark(student, subject, date(2024, 1, day), AttendanceStatus.PRESENT)

    items = container.dashboard_service.teacher_activity(identity_of(teacher))

    assert len(items) == ACTIVITY_FEED_SIZE
