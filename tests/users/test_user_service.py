from __future__ import annotations

import pytest

from src.school_attendance.school_attendance.core.enums import Role
from src.school_attendance.school_attendance.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from tests.fakes import identity_of


def _student_payload(**overrides):
    data = {
        "name": "Alice",
        "email": "Alice@Example.com",
        "mobile_number": "0123456789",
        "registration_number": "REG-100",
        "password": "secret123",
    }
    data.update(overrides)
    return data


def test_register_student_normalizes_email_and_hashes_password(store, container):
    user_id = container.user_service.register_student(_student_payload())

    user = store.users[user_id]
    assert user.email == "alice@example.com"
    assert user.role == Role.STUDENT
    assert user.registration_number == "REG-100"
    assert user.password_hash != "secret123"


@pytest.mark.parametrize("missing", ["name", "email", "mobile_number", "registration_number", "password"])
def test_register_student_requires_all_fields(container, missing):
    with pytest.raises(ValidationError, match="All fields are required"):
        container.user_service.register_student(_student_payload(**{missing: ""}))


def test_register_student_rejects_short_password(container):
    with pytest.raises(ValidationError):
        container.user_service.register_student(_student_payload(password="123"))


def test_register_student_conflicts(store, container):
    container.user_service.register_student(_student_payload())

    with pytest.raises(ConflictError, match="Email already registered"):
        container.user_service.register_student(_student_payload(registration_number="REG-200"))
    with pytest.raises(ConflictError, match="Registration number already exists"):
        container.user_service.register_student(_student_payload(email="other@example.com"))


def test_register_teacher_rejects_taken_email(store, container):
    store.add_teacher(email="t@example.com")
    with pytest.raises(ConflictError):
        container.user_service.register_teacher(
            {"name": "T", "email": "t@example.com", "mobile_number": "1", "password": "secret123"}
        )


def test_authenticate(store, container):
    teacher = store.add_teacher(email="t@example.com", password="secret123")
    auth = container.auth_service

    identity = auth.authenticate("T@example.com", "secret123")
    assert identity.user_id == teacher.id
    assert identity.is_teacher

    with pytest.raises(AuthenticationError):
        auth.authenticate("t@example.com", "wrong-password")
    with pytest.raises(AuthenticationError):
        auth.authenticate("t@example.com", "secret123", "student")
    with pytest.raises(ValidationError):
        auth.authenticate("t@example.com", "secret123", "admin")
    with pytest.raises(ValidationError):
        auth.authenticate("", "")


def test_get_user_respects_access(store, container):
    student = store.add_student()
    other = store.add_student()
    teacher = store.add_teacher()

    assert container.user_service.get_user(identity_of(teacher), student.id) == student
    with pytest.raises(AuthorizationError):
        container.user_service.get_user(identity_of(student), other.id)
    with pytest.raises(NotFoundError):
        container.user_service.get_user(identity_of(teacher), 999)


def test_teacher_cannot_delete_other_teacher_but_can_delete_self(store, container):
    teacher = store.add_teacher()
    other = store.add_teacher()

    with pytest.raises(AuthorizationError):
        container.user_service.delete_user(identity_of(teacher), other.id)
    assert other.id in store.users

    assert container.user_service.delete_user(identity_of(teacher), teacher.id) is True
    assert teacher.id not in store.users


def test_teacher_deleting_student_cascades(store, container):
    teacher = store.add_teacher()
    student = store.add_student()
    store.enroll(student, store.add_subject(store.add_stream(teacher)))

    assert container.user_service.delete_user(identity_of(teacher), student.id) is False
    assert store.enrollments == {}
