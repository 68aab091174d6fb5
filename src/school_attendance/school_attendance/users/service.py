from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..access.guard import check_user_access, check_user_deletion
from ..access.identity import Identity
from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str, role: Optional[str] = None) -> Identity:
        if not email or not password:
            raise ValidationError("Email and password are required")

        expected_role: Optional[Role] = None
        if role:
            try:
                expected_role = Role(role)
            except ValueError:
                raise ValidationError("Invalid role")

        user = self._users.get_by_email(str(email).strip().lower())
        if not user or (expected_role is not None and user.role != expected_role):
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except Exception:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return Identity(user_id=user.id, role=user.role, name=user.name)


class UserService:
    """Use cases: registration, profile lookup and account deletion."""

    def __init__(self, users: UserRepository):
        self._users = users

    def _require_unused_email(self, email: str) -> None:
        if self._users.get_by_email(email):
            raise ConflictError("Email already registered")

    def register_student(self, data: Mapping[str, Any]) -> int:
        fields = ("name", "email", "mobile_number", "registration_number", "password")
        if any(not data.get(f) for f in fields):
            raise ValidationError("All fields are required")

        name = require_non_empty(data.get("name"), "Name")
        email = require_email(data.get("email"))
        mobile_number = require_non_empty(data.get("mobile_number"), "Mobile number")
        registration_number = require_non_empty(data.get("registration_number"), "Registration number")
        password = require_min_length(data.get("password"), "Password", MIN_PASSWORD_LENGTH)

        self._require_unused_email(email)
        if self._users.get_by_registration_number(registration_number):
            raise ConflictError("Registration number already exists")

        user_id = self._users.create_student(
            name=name,
            email=email,
            mobile_number=mobile_number,
            registration_number=registration_number,
            password_hash=generate_password_hash(password),
        )
        logger.info("Registered student %s (%s)", user_id, registration_number)
        return user_id

    def register_teacher(self, data: Mapping[str, Any]) -> int:
        fields = ("name", "email", "mobile_number", "password")
        if any(not data.get(f) for f in fields):
            raise ValidationError("All fields are required")

        name = require_non_empty(data.get("name"), "Name")
        email = require_email(data.get("email"))
        mobile_number = require_non_empty(data.get("mobile_number"), "Mobile number")
        password = require_min_length(data.get("password"), "Password", MIN_PASSWORD_LENGTH)

        self._require_unused_email(email)

        user_id = self._users.create_teacher(
            name=name,
            email=email,
            mobile_number=mobile_number,
            password_hash=generate_password_hash(password),
        )
        logger.info("Registered teacher %s", user_id)
        return user_id

    def get_user(self, identity: Optional[Identity], user_id: int) -> User:
        check_user_access(identity, user_id)
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def delete_user(self, identity: Optional[Identity], user_id: int) -> bool:
        """Delete an account; returns True when the caller deleted themselves."""

        check_user_access(identity, user_id)
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        identity = check_user_deletion(identity, user)

        if not self._users.delete_by_id(user.id):
            raise NotFoundError("User not found")

        logger.info("User %s deleted account %s", identity.user_id, user.id)
        return identity.user_id == user.id

    def list_students(self):
        return self._users.list_students()
