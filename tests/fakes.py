from __future__ import annotations

import itertools
from datetime import date, datetime

from werkzeug.security import generate_password_hash

from src.school_attendance.school_attendance.access.identity import Identity
from src.school_attendance.school_attendance.attendance.model import AttendanceRecord
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, Role
from src.school_attendance.school_attendance.enrollments.model import SubjectEnrollment
from src.school_attendance.school_attendance.streams.model import Stream
from src.school_attendance.school_attendance.subjects.model import Subject
from src.school_attendance.school_attendance.users.model import StudentProfile, User

FIXED_NOW = datetime(2024, 3, 1, 9, 0, 0)


class Store:
    """Shared in-memory tables; each fake repository reads and writes here."""

    def __init__(self):
        self._ids = itertools.count(1)
        self.users: dict[int, User] = {}
        self.streams: dict[int, Stream] = {}
        self.subjects: dict[int, Subject] = {}
        self.enrollments: dict[int, SubjectEnrollment] = {}
        self.attendance: dict[int, AttendanceRecord] = {}

    def next_id(self) -> int:
        return next(self._ids)

    # Helpers for arranging test data

    def add_teacher(self, name="Teacher", email=None, password="secret123") -> User:
        uid = self.next_id()
        user = User(
            id=uid,
            name=name,
            email=email or f"teacher{uid}@example.com",
            password_hash=generate_password_hash(password),
            role=Role.TEACHER,
            mobile_number="0100000000",
        )
        self.users[uid] = user
        return user

    def add_student(self, name="Student", email=None, registration_number=None, password="secret123") -> User:
        uid = self.next_id()
        user = User(
            id=uid,
            name=name,
            email=email or f"student{uid}@example.com",
            password_hash=generate_password_hash(password),
            role=Role.STUDENT,
            mobile_number="0200000000",
            registration_number=registration_number or f"REG-{uid:04d}",
        )
        self.users[uid] = user
        return user

    def add_stream(self, teacher: User, name="Science", description=None) -> Stream:
        sid = self.next_id()
        stream = Stream(id=sid, name=name, description=description, teacher_id=teacher.id, created_at=FIXED_NOW)
        self.streams[sid] = stream
        return stream

    def add_subject(self, stream: Stream, name="Physics", description=None) -> Subject:
        sid = self.next_id()
        subject = Subject(id=sid, name=name, description=description, stream_id=stream.id, created_at=FIXED_NOW)
        self.subjects[sid] = subject
        return subject

    def enroll(self, student: User, subject: Subject) -> SubjectEnrollment:
        eid = self.next_id()
        enrollment = SubjectEnrollment(id=eid, student_id=student.id, subject_id=subject.id, created_at=FIXED_NOW)
        self.enrollments[eid] = enrollment
        return enrollment

    def mark(self, student: User, subject: Subject, on_date: date, status: AttendanceStatus) -> AttendanceRecord:
        rid = self.next_id()
        record = AttendanceRecord(
            id=rid,
            student_id=student.id,
            subject_id=subject.id,
            date=on_date,
            status=status,
            subject_name=subject.name,
            created_at=FIXED_NOW,
        )
        self.attendance[rid] = record
        return record

    # Queries shared by the fakes

    def profile(self, user: User) -> StudentProfile:
        return StudentProfile(
            id=user.id,
            name=user.name,
            email=user.email,
            registration_number=user.registration_number or "",
            mobile_number=user.mobile_number,
        )

    def students(self) -> list[User]:
        return sorted((u for u in self.users.values() if u.role == Role.STUDENT), key=lambda u: u.name)

    def stream_subject_ids(self, stream_id: int) -> set[int]:
        return {s.id for s in self.subjects.values() if s.stream_id == stream_id}

    def enrolled_subject_ids(self, student_id: int) -> set[int]:
        return {e.subject_id for e in self.enrollments.values() if e.student_id == student_id}


class InMemoryUsers:
    def __init__(self, store: Store):
        self._s = store

    def get_by_id(self, user_id):
        return self._s.users.get(int(user_id))

    def get_by_email(self, email):
        return next((u for u in self._s.users.values() if u.email == email), None)

    def get_by_registration_number(self, registration_number):
        return next((u for u in self._s.users.values() if u.registration_number == registration_number), None)

    def create_student(self, *, name, email, mobile_number, registration_number, password_hash):
        uid = self._s.next_id()
        self._s.users[uid] = User(
            id=uid,
            name=name,
            email=email,
            password_hash=password_hash,
            role=Role.STUDENT,
            mobile_number=mobile_number,
            registration_number=registration_number,
        )
        return uid

    def create_teacher(self, *, name, email, mobile_number, password_hash):
        uid = self._s.next_id()
        self._s.users[uid] = User(
            id=uid, name=name, email=email, password_hash=password_hash, role=Role.TEACHER, mobile_number=mobile_number
        )
        return uid

    def delete_by_id(self, user_id):
        user_id = int(user_id)
        if self._s.users.pop(user_id, None) is None:
            return False
        # ON DELETE CASCADE
        for sid in [s.id for s in self._s.streams.values() if s.teacher_id == user_id]:
            InMemoryStreams(self._s).delete(sid)
        for table in (self._s.enrollments, self._s.attendance):
            for key in [k for k, v in table.items() if v.student_id == user_id]:
                del table[key]
        return True

    def list_students(self):
        return [self._s.profile(u) for u in self._s.students()]


class InMemoryStreams:
    def __init__(self, store: Store):
        self._s = store

    def get_by_id(self, stream_id):
        return self._s.streams.get(int(stream_id))

    def create(self, *, name, description, teacher_id):
        sid = self._s.next_id()
        self._s.streams[sid] = Stream(id=sid, name=name, description=description, teacher_id=teacher_id)
        return sid

    def update(self, stream_id, *, name, description):
        stream = self._s.streams.get(int(stream_id))
        if not stream:
            return False
        self._s.streams[stream.id] = Stream(
            id=stream.id, name=name, description=description, teacher_id=stream.teacher_id
        )
        return True

    def delete(self, stream_id):
        stream_id = int(stream_id)
        if self._s.streams.pop(stream_id, None) is None:
            return False
        for subject_id in self._s.stream_subject_ids(stream_id):
            InMemorySubjects(self._s).delete(subject_id)
        return True

    def count_subjects(self, stream_id):
        return len(self._s.stream_subject_ids(int(stream_id)))

    def count_students(self, stream_id):
        subject_ids = self._s.stream_subject_ids(int(stream_id))
        return len({e.student_id for e in self._s.enrollments.values() if e.subject_id in subject_ids})

    def list_for_teacher(self, teacher_id):
        return [
            {
                "id": s.id,
                "name": s.name,
                "description": s.description,
                "subjectCount": self.count_subjects(s.id),
                "studentCount": self.count_students(s.id),
            }
            for s in self._s.streams.values()
            if s.teacher_id == int(teacher_id)
        ]

    def list_for_student(self, student_id):
        held = self._s.enrolled_subject_ids(int(student_id))
        out = []
        for s in self._s.streams.values():
            subject_ids = self._s.stream_subject_ids(s.id)
            if subject_ids & held:
                out.append(
                    {
                        "id": s.id,
                        "name": s.name,
                        "description": s.description,
                        "teacherName": self._s.users[s.teacher_id].name,
                        "subjectCount": len(subject_ids),
                        "enrolledSubjectCount": len(subject_ids & held),
                    }
                )
        return out

    def get_with_teacher(self, stream_id):
        s = self._s.streams.get(int(stream_id))
        if not s:
            return None
        return {"id": s.id, "name": s.name, "description": s.description, "teacherName": self._s.users[s.teacher_id].name}


class InMemorySubjects:
    def __init__(self, store: Store):
        self._s = store

    def get_by_id(self, subject_id):
        return self._s.subjects.get(int(subject_id))

    def list_for_stream(self, stream_id):
        return sorted(
            (s for s in self._s.subjects.values() if s.stream_id == int(stream_id)), key=lambda s: s.name
        )

    def create(self, *, name, description, stream_id):
        sid = self._s.next_id()
        self._s.subjects[sid] = Subject(id=sid, name=name, description=description, stream_id=stream_id)
        return sid

    def update(self, subject_id, *, name, description):
        subject = self._s.subjects.get(int(subject_id))
        if not subject:
            return False
        self._s.subjects[subject.id] = Subject(
            id=subject.id, name=name, description=description, stream_id=subject.stream_id
        )
        return True

    def delete(self, subject_id):
        subject_id = int(subject_id)
        if self._s.subjects.pop(subject_id, None) is None:
            return False
        for table in (self._s.enrollments, self._s.attendance):
            for key in [k for k, v in table.items() if v.subject_id == subject_id]:
                del table[key]
        return True

    def count_students(self, subject_id):
        return sum(1 for e in self._s.enrollments.values() if e.subject_id == int(subject_id))

    def list_for_teacher(self, teacher_id):
        out = []
        for sub in self._s.subjects.values():
            stream = self._s.streams[sub.stream_id]
            if stream.teacher_id == int(teacher_id):
                out.append(
                    {
                        "id": sub.id,
                        "name": sub.name,
                        "description": sub.description,
                        "stream_id": stream.id,
                        "streamName": stream.name,
                        "studentCount": self.count_students(sub.id),
                    }
                )
        return out

    def list_for_student(self, student_id):
        out = []
        for subject_id in sorted(self._s.enrolled_subject_ids(int(student_id))):
            sub = self._s.subjects[subject_id]
            stream = self._s.streams[sub.stream_id]
            out.append(
                {
                    "id": sub.id,
                    "name": sub.name,
                    "description": sub.description,
                    "stream_id": stream.id,
                    "stream_name": stream.name,
                    "teacher_name": self._s.users[stream.teacher_id].name,
                }
            )
        return out

    def list_in_stream_for_student(self, *, student_id, stream_id):
        held = self._s.enrolled_subject_ids(int(student_id))
        return [
            {"id": s.id, "name": s.name, "description": s.description, "enrolled": s.id in held}
            for s in self.list_for_stream(stream_id)
        ]


class InMemoryEnrollments:
    def __init__(self, store: Store):
        self._s = store

    def create(self, *, student_id, subject_id):
        if self.exists(student_id=student_id, subject_id=subject_id):
            return None
        eid = self._s.next_id()
        self._s.enrollments[eid] = SubjectEnrollment(
            id=eid, student_id=int(student_id), subject_id=int(subject_id), created_at=FIXED_NOW
        )
        return eid

    def delete(self, *, student_id, subject_id):
        for key, e in list(self._s.enrollments.items()):
            if e.student_id == int(student_id) and e.subject_id == int(subject_id):
                del self._s.enrollments[key]
                return True
        return False

    def delete_for_stream(self, *, student_id, stream_id):
        removed = 0
        for subject_id in self.subject_ids_in_stream(student_id=student_id, stream_id=stream_id):
            removed += int(self.delete(student_id=student_id, subject_id=subject_id))
        return removed

    def exists(self, *, student_id, subject_id):
        return any(
            e.student_id == int(student_id) and e.subject_id == int(subject_id) for e in self._s.enrollments.values()
        )

    def subject_ids_in_stream(self, *, student_id, stream_id):
        return self._s.enrolled_subject_ids(int(student_id)) & self._s.stream_subject_ids(int(stream_id))

    def list_students_in_stream(self, stream_id):
        subject_ids = self._s.stream_subject_ids(int(stream_id))
        return [
            self._s.profile(u) for u in self._s.students() if self._s.enrolled_subject_ids(u.id) & subject_ids
        ]

    def list_students_in_subject(self, subject_id):
        return [self._s.profile(u) for u in self._s.students() if int(subject_id) in self._s.enrolled_subject_ids(u.id)]

    def list_available_for_stream(self, stream_id):
        subject_ids = self._s.stream_subject_ids(int(stream_id))
        return [
            self._s.profile(u)
            for u in self._s.students()
            if not subject_ids <= self._s.enrolled_subject_ids(u.id)
        ]

    def list_available_for_subject(self, subject_id):
        return [
            self._s.profile(u) for u in self._s.students() if int(subject_id) not in self._s.enrolled_subject_ids(u.id)
        ]


class InMemoryAttendance:
    def __init__(self, store: Store):
        self._s = store

    def list_for_student(self, student_id, *, subject_id=None, stream_id=None):
        rows = [r for r in self._s.attendance.values() if r.student_id == int(student_id)]
        if subject_id is not None:
            rows = [r for r in rows if r.subject_id == int(subject_id)]
        if stream_id is not None:
            subject_ids = self._s.stream_subject_ids(int(stream_id))
            rows = [r for r in rows if r.subject_id in subject_ids]
        return sorted(rows, key=lambda r: (r.date, r.id), reverse=True)

    def upsert_many(self, *, subject_id, on_date, entries):
        subject = self._s.subjects[int(subject_id)]
        for entry in entries:
            existing = next(
                (
                    r
                    for r in self._s.attendance.values()
                    if r.student_id == entry.student_id and r.subject_id == subject.id and r.date == on_date
                ),
                None,
            )
            rid = existing.id if existing else self._s.next_id()
            self._s.attendance[rid] = AttendanceRecord(
                id=rid,
                student_id=entry.student_id,
                subject_id=subject.id,
                date=on_date,
                status=entry.status,
                subject_name=subject.name,
                created_at=FIXED_NOW,
            )
        return len(entries)

    def _matching(self, subject_id, on_date, start, end):
        rows = [r for r in self._s.attendance.values() if r.subject_id == int(subject_id)]
        if on_date is not None:
            return [r for r in rows if r.date == on_date]
        if start is not None and end is not None:
            return [r for r in rows if start <= r.date <= end]
        return rows

    def list_for_subject(self, subject_id, *, on_date=None, start=None, end=None, limit=50, offset=0):
        rows = self._matching(subject_id, on_date, start, end)
        rows.sort(key=lambda r: self._s.users[r.student_id].name)
        rows.sort(key=lambda r: r.date, reverse=True)
        return [
            {
                "id": r.id,
                "student_id": r.student_id,
                "student_name": self._s.users[r.student_id].name,
                "registration_number": self._s.users[r.student_id].registration_number,
                "status": r.status.value,
                "date": r.date.isoformat(),
            }
            for r in rows[offset : offset + limit]
        ]

    def count_for_subject(self, subject_id, *, on_date=None, start=None, end=None):
        return len(self._matching(subject_id, on_date, start, end))


class InMemoryDashboard:
    def __init__(self, store: Store):
        self._s = store

    def _teacher_subject_ids(self, teacher_id):
        return {
            sub.id
            for sub in self._s.subjects.values()
            if self._s.streams[sub.stream_id].teacher_id == int(teacher_id)
        }

    def teacher_counts(self, teacher_id):
        subject_ids = self._teacher_subject_ids(teacher_id)
        return {
            "streamCount": sum(1 for s in self._s.streams.values() if s.teacher_id == int(teacher_id)),
            "subjectCount": len(subject_ids),
            "studentCount": len({e.student_id for e in self._s.enrollments.values() if e.subject_id in subject_ids}),
        }

    def student_counts(self, student_id):
        held = self._s.enrolled_subject_ids(int(student_id))
        rows = [r for r in self._s.attendance.values() if r.student_id == int(student_id)]
        return {
            "streamCount": len({self._s.subjects[i].stream_id for i in held}),
            "subjectCount": len(held),
            "total": len(rows),
            "attended": sum(1 for r in rows if r.status in (AttendanceStatus.PRESENT, AttendanceStatus.LATE)),
        }

    @staticmethod
    def _in_window(value, start, end):
        day = value.date() if isinstance(value, datetime) else value
        return start is None or end is None or start <= day <= end

    def recent_attendance(self, teacher_id, *, start, end, limit):
        subject_ids = self._teacher_subject_ids(teacher_id)
        return [
            {
                "id": r.id,
                "date": r.date,
                "status": r.status.value,
                "student_name": self._s.users[r.student_id].name,
                "subject_name": self._s.subjects[r.subject_id].name,
                "subject_id": r.subject_id,
            }
            for r in self._s.attendance.values()
            if r.subject_id in subject_ids and self._in_window(r.date, start, end)
        ][:limit]

    def recent_enrollments(self, teacher_id, *, start, end, limit):
        subject_ids = self._teacher_subject_ids(teacher_id)
        return [
            {
                "id": e.id,
                "created_at": e.created_at,
                "student_name": self._s.users[e.student_id].name,
                "subject_name": self._s.subjects[e.subject_id].name,
                "subject_id": e.subject_id,
            }
            for e in self._s.enrollments.values()
            if e.subject_id in subject_ids and self._in_window(e.created_at, start, end)
        ][:limit]

    def recent_subjects(self, teacher_id, *, start, end, limit):
        subject_ids = self._teacher_subject_ids(teacher_id)
        return [
            {
                "id": sub.id,
                "name": sub.name,
                "created_at": sub.created_at,
                "stream_name": self._s.streams[sub.stream_id].name,
                "stream_id": sub.stream_id,
            }
            for sub in self._s.subjects.values()
            if sub.id in subject_ids and self._in_window(sub.created_at, start, end)
        ][:limit]

    def recent_streams(self, teacher_id, *, start, end, limit):
        return [
            {"id": s.id, "name": s.name, "created_at": s.created_at}
            for s in self._s.streams.values()
            if s.teacher_id == int(teacher_id) and self._in_window(s.created_at, start, end)
        ][:limit]


def identity_of(user: User) -> Identity:
    return Identity(user_id=user.id, role=user.role, name=user.name)

