from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Mapping, Optional

from flask import current_app, session

from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role


@dataclass(frozen=True)
class Identity:
    """Who is calling: resolved from the signed session cookie."""

    user_id: int
    role: Role
    name: str = ""

    @property
    def is_teacher(self) -> bool:
        return self.role == Role.TEACHER

    def to_dict(self) -> dict:
        return {"id": self.user_id, "role": self.role.value, "name": self.name}


def resolve_identity(data: Mapping[str, Any]) -> Optional[Identity]:
    """Read `(user_id, role)` from session data; anything malformed is no identity."""

    raw_id = data.get("user_id")
    raw_role = data.get("role")
    if raw_id is None or raw_role is None:
        return None
    try:
        user_id = int(raw_id)
        role = Role(raw_role)
    except (TypeError, ValueError):
        return None
    if user_id <= 0:
        return None
    return Identity(user_id=user_id, role=role, name=str(data.get("name") or ""))


def current_identity() -> Optional[Identity]:
    return resolve_identity(session)


def start_session(identity: Identity, *, remember: bool = False) -> None:
    session.clear()
    session.permanent = bool(remember)
    days = int(current_app.config.get("SESSION_DAYS", DEFAULT_SESSION_DAYS))
    current_app.permanent_session_lifetime = timedelta(days=days)

    session["user_id"] = identity.user_id
    session["role"] = identity.role.value
    session["name"] = identity.name


def end_session() -> None:
    session.clear()
