from __future__ import annotations

from ..core.enums import APPROVER_ROLES, Role
from ..core.exceptions import AuthorizationError


def is_approver(role: Role) -> bool:
    return role in APPROVER_ROLES


def require_approver(role: Role) -> None:
    if not is_approver(role):
        raise AuthorizationError("Only admins and supervisors may do this")
