from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Dict, Optional

from flask import jsonify, request

from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)


def error_response(message: str, status: int):
    return jsonify({"error": message}), status


def json_api(failure_message: str):
    """Turn domain errors into `{"error": ...}` responses.

    Anything that is not a DomainError is logged and reported as a 500 with
    `failure_message`.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                if e.status_code >= 500:
                    logger.error("%s %s failed: %s", request.method, request.path, e)
                return error_response(str(e) or failure_message, e.status_code)
            except Exception:
                logger.exception("%s %s failed", request.method, request.path)
                return error_response(failure_message, 500)

        return wrapper

    return decorator


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def query_int(name: str, *, minimum: Optional[int] = None, maximum: Optional[int] = None) -> Optional[int]:
    raw = request.args.get(name)
    if raw is None or raw.strip() == "" or raw == "undefined":
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"Invalid {name}")
    if minimum is not None and value < minimum:
        raise ValidationError(f"Invalid {name}")
    if maximum is not None and value > maximum:
        raise ValidationError(f"Invalid {name}")
    return value


def period_args() -> Dict[str, Optional[int]]:
    """Read the `month`/`year` filter pair shared by attendance and activity routes."""
    return {
        "month": query_int("month", minimum=1, maximum=12),
        "year": query_int("year", minimum=1, maximum=9999),
    }
