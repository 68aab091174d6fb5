from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .access.guard import AccessGuard
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import StudentAttendanceService, TeacherAttendanceService
from .dashboard.mysql_dashboard_repository import MySQLDashboardRepository
from .dashboard.repository import DashboardRepository
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .enrollments.mysql_enrollment_repository import MySQLEnrollmentRepository
from .enrollments.repository import EnrollmentRepository
from .enrollments.service import EnrollmentService
from .streams.mysql_stream_repository import MySQLStreamRepository
from .streams.repository import StreamRepository
from .streams.service import StreamService, StudentStreamService
from .subjects.mysql_subject_repository import MySQLSubjectRepository
from .subjects.repository import SubjectRepository
from .subjects.service import SubjectService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    streams_repo: StreamRepository
    subjects_repo: SubjectRepository
    enrollments_repo: EnrollmentRepository
    attendance_repo: AttendanceRepository
    dashboard_repo: DashboardRepository

    guard: AccessGuard

    auth_service: AuthService
    user_service: UserService
    stream_service: StreamService
    student_stream_service: StudentStreamService
    subject_service: SubjectService
    enrollment_service: EnrollmentService
    student_attendance_service: StudentAttendanceService
    teacher_attendance_service: TeacherAttendanceService
    dashboard_service: DashboardService


def wire_container(
    *,
    conn: Optional[DatabaseConnection],
    users_repo: UserRepository,
    streams_repo: StreamRepository,
    subjects_repo: SubjectRepository,
    enrollments_repo: EnrollmentRepository,
    attendance_repo: AttendanceRepository,
    dashboard_repo: DashboardRepository,
) -> Container:
    """Build every service on top of the given repositories.

    Tests pass in-memory repositories here; `build_container` passes MySQL ones.
    """
    guard = AccessGuard(streams_repo, subjects_repo, enrollments_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        streams_repo=streams_repo,
        subjects_repo=subjects_repo,
        enrollments_repo=enrollments_repo,
        attendance_repo=attendance_repo,
        dashboard_repo=dashboard_repo,
        guard=guard,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        stream_service=StreamService(streams_repo, guard),
        student_stream_service=StudentStreamService(streams_repo, subjects_repo, guard),
        subject_service=SubjectService(subjects_repo, streams_repo, guard),
        enrollment_service=EnrollmentService(enrollments_repo, subjects_repo, users_repo, guard),
        student_attendance_service=StudentAttendanceService(attendance_repo, streams_repo, subjects_repo, guard),
        teacher_attendance_service=TeacherAttendanceService(attendance_repo, enrollments_repo, guard),
        dashboard_service=DashboardService(dashboard_repo),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return wire_container(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        streams_repo=MySQLStreamRepository(conn),
        subjects_repo=MySQLSubjectRepository(conn),
        enrollments_repo=MySQLEnrollmentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        dashboard_repo=MySQLDashboardRepository(conn),
    )
