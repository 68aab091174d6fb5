from __future__ import annotations

from datetime import datetime
from typing import Optional

import pytest

from src.school_attendance.school_attendance.container import wire_container
from src.school_attendance.school_attendance.main import create_app
from src.school_attendance.school_attendance.users.model import User
from tests.fakes import (
    FIXED_NOW,
    InMemoryAttendance,
    InMemoryDashboard,
    InMemoryEnrollments,
    InMemoryStreams,
    InMemorySubjects,
    InMemoryUsers,
    Store,
)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def store() -> Store:
    return Store()


@pytest.fixture
def container(store):
    return wire_container(
        conn=None,
        users_repo=InMemoryUsers(store),
        streams_repo=InMemoryStreams(store),
        subjects_repo=InMemorySubjects(store),
        enrollments_repo=InMemoryEnrollments(store),
        attendance_repo=InMemoryAttendance(store),
        dashboard_repo=InMemoryDashboard(store),
    )


@pytest.fixture
def app(container):
    return create_app(container=container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    """Put a user into the session cookie without going through /api/auth/login."""

    def _login(user: Optional[User]):
        with client.session_transaction() as sess:
            sess.clear()
            if user is not None:
                sess["user_id"] = user.id
                sess["role"] = user.role.value
                sess["name"] = user.name
        return client

    return _login
