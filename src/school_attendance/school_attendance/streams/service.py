from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..access.guard import AccessGuard, require_role
from ..access.identity import Identity
from ..common.validators import optional_text
from ..core.enums import Role
from ..core.exceptions import InternalError, NotFoundError, ValidationError
from ..subjects.repository import SubjectRepository
from .repository import StreamRepository


def _stream_fields(data: Mapping[str, Any]) -> tuple[str, Optional[str]]:
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Stream name is required")
    return name.strip(), optional_text(data.get("description"))


class StreamService:
    """Teacher-side stream management."""

    def __init__(self, streams: StreamRepository, guard: AccessGuard):
        self._streams = streams
        self._guard = guard

    def list_for_teacher(self, identity: Optional[Identity]) -> Sequence[dict]:
        identity = require_role(identity, Role.TEACHER)
        return self._streams.list_for_teacher(identity.user_id)

    def create(self, identity: Optional[Identity], data: Mapping[str, Any]) -> dict:
        identity = require_role(identity, Role.TEACHER)
        name, description = _stream_fields(data)
        stream_id = self._streams.create(name=name, description=description, teacher_id=identity.user_id)
        return {"id": stream_id, "name": name, "description": description}

    def get_detail(self, identity: Optional[Identity], stream_id: int) -> dict:
        stream = self._guard.require_stream_owner(identity, stream_id)
        out = stream.to_dict()
        out["subjectCount"] = self._streams.count_subjects(stream.id)
        out["studentCount"] = self._streams.count_students(stream.id)
        return out

    def update(self, identity: Optional[Identity], stream_id: int, data: Mapping[str, Any]) -> dict:
        stream = self._guard.require_stream_owner(identity, stream_id)
        name, description = _stream_fields(data)
        if not self._streams.update(stream.id, name=name, description=description):
            raise InternalError("Failed to update stream")
        return {"id": stream.id, "name": name, "description": description}

    def delete(self, identity: Optional[Identity], stream_id: int) -> None:
        stream = self._guard.require_stream_owner(identity, stream_id)
        if not self._streams.delete(stream.id):
            raise InternalError("Failed to delete stream")


class StudentStreamService:
    """Student-side stream views; every stream lookup requires membership."""

    def __init__(self, streams: StreamRepository, subjects: SubjectRepository, guard: AccessGuard):
        self._streams = streams
        self._subjects = subjects
        self._guard = guard

    def list_for_student(self, identity: Optional[Identity]) -> Sequence[dict]:
        identity = require_role(identity, Role.STUDENT)
        return self._streams.list_for_student(identity.user_id)

    def get_for_student(self, identity: Optional[Identity], stream_id: int) -> dict:
        stream = self._guard.require_stream_member(identity, stream_id)
        details = self._streams.get_with_teacher(stream.id)
        if not details:
            raise NotFoundError("Stream not found")
        return details

    def subjects_for_student(self, identity: Optional[Identity], stream_id: int) -> Sequence[dict]:
        stream = self._guard.require_stream_member(identity, stream_id)
        return self._subjects.list_in_stream_for_student(student_id=identity.user_id, stream_id=stream.id)
