from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a registered student or teacher.

    Plain data object; no DB access here. `registration_number` is only set
    for students.
    """

    id: int
    name: str
    email: str
    password_hash: str
    role: Role
    mobile_number: Optional[str] = None
    registration_number: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_public_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "mobile_number": self.mobile_number,
            "registration_number": self.registration_number,
            "role": self.role.value,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class StudentProfile:
    """Read-model for student listings (enrollment screens)."""

    id: int
    name: str
    email: str
    registration_number: str
    mobile_number: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "registration_number": self.registration_number,
            "mobile_number": self.mobile_number,
        }
