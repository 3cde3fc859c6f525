from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConstraintViolation,
    DomainError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from .permissions import is_approver

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (InvalidStateError, 409),
    (ConstraintViolation, 409),
)


def ok(data: Any = None, *, message: Optional[str] = None, status: int = 200, **extra):
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return jsonify(body), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def error_response(exc: Exception, *, action: str):
    """Translate a service exception into the JSON error contract."""
    if isinstance(exc, ConstraintViolation):
        # Store details stay in the log.
        logger.warning("Constraint violation while trying to %s: %s", action, exc)
        return fail(f"Could not {action}: the schedule changed concurrently, please retry", 409)
    if isinstance(exc, DomainError):
        for error_type, status in _STATUS_BY_ERROR:
            if isinstance(exc, error_type):
                return fail(str(exc), status)
        return fail(str(exc), 400)

    logger.exception("Unexpected error while trying to %s", action)
    return fail(f"Server error while trying to {action}", 500)


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role"))


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def approver_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please log in to continue", 401)
        if not is_approver(current_role()):
            return fail("Only admins and supervisors may do this", 403)
        return view(*args, **kwargs)

    return wrapper
