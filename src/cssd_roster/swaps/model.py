from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import SwapStatus


@dataclass(frozen=True)
class SwapRequest:
    """A proposal to exchange the requester's entry with the target's entry."""

    swap_id: int
    requester_id: int
    requester_schedule_id: int
    target_id: int
    target_schedule_id: int
    reason: str
    status: SwapStatus
    created_at: datetime
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == SwapStatus.PENDING

    def involves(self, user_id: int) -> bool:
        return user_id in (self.requester_id, self.target_id)
