from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..access.guard import AccessGuard, require_role
from ..access.identity import Identity
from ..common.validators import optional_text
from ..core.enums import Role
from ..core.exceptions import InternalError, NotFoundError, ValidationError
from ..streams.repository import StreamRepository
from .repository import SubjectRepository


def _subject_fields(data: Mapping[str, Any]) -> tuple[str, Optional[str]]:
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Subject name is required")
    return name.strip(), optional_text(data.get("description"))


class SubjectService:
    def __init__(self, subjects: SubjectRepository, streams: StreamRepository, guard: AccessGuard):
        self._subjects = subjects
        self._streams = streams
        self._guard = guard

    # Teacher side

    def list_for_teacher(self, identity: Optional[Identity]) -> Sequence[dict]:
        identity = require_role(identity, Role.TEACHER)
        return self._subjects.list_for_teacher(identity.user_id)

    def list_for_stream(self, identity: Optional[Identity], stream_id: int) -> Sequence[dict]:
        stream = self._guard.require_stream_owner(identity, stream_id)
        return [
            {"id": s.id, "name": s.name, "description": s.description}
            for s in self._subjects.list_for_stream(stream.id)
        ]

    def create(self, identity: Optional[Identity], stream_id: int, data: Mapping[str, Any]) -> dict:
        stream = self._guard.require_stream_owner(identity, stream_id)
        name, description = _subject_fields(data)
        subject_id = self._subjects.create(name=name, description=description, stream_id=stream.id)
        return {"id": subject_id, "name": name, "description": description}

    def get_detail(self, identity: Optional[Identity], subject_id: int) -> dict:
        subject, stream = self._guard.require_subject_owner(identity, subject_id)
        out = subject.to_dict()
        out["studentCount"] = self._subjects.count_students(subject.id)
        out["streamName"] = stream.name
        return out

    def update(self, identity: Optional[Identity], subject_id: int, data: Mapping[str, Any]) -> dict:
        subject, _ = self._guard.require_subject_owner(identity, subject_id)
        name, description = _subject_fields(data)
        if not self._subjects.update(subject.id, name=name, description=description):
            raise InternalError("Failed to update subject")
        return {"id": subject.id, "name": name, "description": description}

    def delete(self, identity: Optional[Identity], subject_id: int) -> None:
        subject, _ = self._guard.require_subject_owner(identity, subject_id)
        if not self._subjects.delete(subject.id):
            raise InternalError("Failed to delete subject")

    # Student side

    def list_for_student(self, identity: Optional[Identity]) -> Sequence[dict]:
        identity = require_role(identity, Role.STUDENT)
        return self._subjects.list_for_student(identity.user_id)

    def get_for_student(self, identity: Optional[Identity], subject_id: int) -> dict:
        subject = self._guard.require_subject_member(identity, subject_id)
        stream = self._streams.get_with_teacher(subject.stream_id)
        if not stream:
            raise NotFoundError("Stream not found")
        return {
            "id": subject.id,
            "name": subject.name,
            "description": subject.description,
            "streamId": subject.stream_id,
            "streamName": stream["name"],
            "teacherName": stream["teacherName"],
        }
