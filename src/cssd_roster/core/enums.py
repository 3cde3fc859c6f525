from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    SUPERVISOR = "supervisor"
    STAFF = "staff"


APPROVER_ROLES = frozenset({Role.ADMIN, Role.SUPERVISOR})


class ScheduleStatus(str, Enum):
    """Status of one employee's assignment for one day."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ABSENT = "absent"
    LEAVE = "leave"


class SwapStatus(str, Enum):
    """Approval flow of a shift swap request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
