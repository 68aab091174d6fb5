from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import StudentProfile, User


class UserRepository(Protocol):
    """Repository interface for users.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_registration_number(self, registration_number: str) -> Optional[User]:
        raise NotImplementedError

    def create_student(
        self,
        *,
        name: str,
        email: str,
        mobile_number: str,
        registration_number: str,
        password_hash: str,
    ) -> int:
        raise NotImplementedError

    def create_teacher(self, *, name: str, email: str, mobile_number: str, password_hash: str) -> int:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def list_students(self) -> Sequence[StudentProfile]:
        raise NotImplementedError
