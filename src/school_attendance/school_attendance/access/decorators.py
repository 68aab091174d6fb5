from __future__ import annotations

from functools import wraps

from flask import g

from ..core.enums import Role
from .guard import require_identity, require_role
from .identity import current_identity


def login_required(view):
    """Resolve the caller into `g.identity` or fail with 401."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        g.identity = require_identity(current_identity())
        return view(*args, **kwargs)

    return wrapper


def role_required(role: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.identity = require_role(current_identity(), role)
            return view(*args, **kwargs)

        return wrapper

    return decorator


teacher_required = role_required(Role.TEACHER)
student_required = role_required(Role.STUDENT)
