"""Authorization rules shared by every route.

Each check either returns the resource it verified or raises one of:

- AuthenticationError (401): no identity in the session.
- AuthorizationError (403): wrong role, not the owner, or not enrolled.
- NotFoundError (404): the resource does not exist.
"""

from __future__ import annotations

from typing import Optional, Tuple

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError
from ..enrollments.repository import EnrollmentRepository
from ..streams.model import Stream
from ..streams.repository import StreamRepository
from ..subjects.model import Subject
from ..subjects.repository import SubjectRepository
from ..users.model import User
from .identity import Identity


def require_identity(identity: Optional[Identity]) -> Identity:
    if identity is None:
        raise AuthenticationError("Unauthorized")
    return identity


def require_role(identity: Optional[Identity], role: Role) -> Identity:
    identity = require_identity(identity)
    if identity.role != role:
        raise AuthorizationError("Access denied")
    return identity


def check_user_access(identity: Optional[Identity], target_user_id: int) -> Identity:
    """Teachers may look up any user; everyone else only themselves."""

    identity = require_identity(identity)
    if not identity.is_teacher and identity.user_id != int(target_user_id):
        raise AuthorizationError("Access denied")
    return identity


def check_user_deletion(identity: Optional[Identity], target: User) -> Identity:
    """Self-deletion is always allowed. Teachers may also delete students."""

    identity = require_identity(identity)
    if identity.user_id == target.id:
        return identity
    if not identity.is_teacher:
        raise AuthorizationError("Access denied")
    if target.role == Role.TEACHER:
        raise AuthorizationError("Teachers cannot delete other teachers")
    return identity


class AccessGuard:
    """Ownership and enrollment checks that need to look at stored rows."""

    def __init__(self, streams: StreamRepository, subjects: SubjectRepository, enrollments: EnrollmentRepository):
        self._streams = streams
        self._subjects = subjects
        self._enrollments = enrollments

    def require_stream_owner(self, identity: Optional[Identity], stream_id: int) -> Stream:
        identity = require_role(identity, Role.TEACHER)
        stream = self._streams.get_by_id(int(stream_id))
        if not stream:
            raise NotFoundError("Stream not found")
        if stream.teacher_id != identity.user_id:
            raise AuthorizationError("You do not own this stream")
        return stream

    def require_subject_owner(self, identity: Optional[Identity], subject_id: int) -> Tuple[Subject, Stream]:
        identity = require_role(identity, Role.TEACHER)
        subject = self._subjects.get_by_id(int(subject_id))
        if not subject:
            raise NotFoundError("Subject not found")
        stream = self._streams.get_by_id(subject.stream_id)
        if not stream:
            raise NotFoundError("Stream not found")
        if stream.teacher_id != identity.user_id:
            raise AuthorizationError("You do not own this subject")
        return subject, stream

    def require_stream_member(self, identity: Optional[Identity], stream_id: int) -> Stream:
        # Membership is checked before existence so a non-member cannot tell
        # a missing stream from someone else's.
        identity = require_role(identity, Role.STUDENT)
        held = self._enrollments.subject_ids_in_stream(student_id=identity.user_id, stream_id=int(stream_id))
        if not held:
            raise AuthorizationError("You are not enrolled in any subject of this stream")
        stream = self._streams.get_by_id(int(stream_id))
        if not stream:
            raise NotFoundError("Stream not found")
        return stream

    def require_subject_member(self, identity: Optional[Identity], subject_id: int) -> Subject:
        identity = require_role(identity, Role.STUDENT)
        subject = self._subjects.get_by_id(int(subject_id))
        if not subject:
            raise NotFoundError("Subject not found")
        if not self._enrollments.exists(student_id=identity.user_id, subject_id=subject.id):
            raise AuthorizationError("You are not enrolled in this subject")
        return subject
