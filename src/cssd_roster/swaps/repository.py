from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import SwapStatus
from ..database.transaction import Transaction
from .model import SwapRequest


class SwapRepository(Protocol):
    """Swap request ledger. Every call runs inside the caller's transaction."""

    def insert(
        self,
        tx: Transaction,
        *,
        requester_id: int,
        requester_schedule_id: int,
        target_id: int,
        target_schedule_id: int,
        reason: str,
    ) -> int:
        """Store a new pending request and return its id."""

        raise NotImplementedError

    def find_by_id_for_update(self, tx: Transaction, *, swap_id: int) -> Optional[SwapRequest]:
        """Read a request holding an exclusive row lock until the transaction ends."""

        raise NotImplementedError

    def update_status(
        self,
        tx: Transaction,
        *,
        swap_id: int,
        status: SwapStatus,
        approver_id: Optional[int],
        approved_at: Optional[datetime],
    ) -> bool:
        """Move a pending request to ``status``. Returns False if it was not pending."""

        raise NotImplementedError

    def list_for_user(
        self,
        tx: Transaction,
        *,
        user_id: int,
        status: Optional[SwapStatus] = None,
        limit: int = 500,
    ) -> Sequence[dict]:
        """Requests where the user is requester or target, newest first."""

        raise NotImplementedError

    def list_by_status(self, tx: Transaction, *, status: Optional[SwapStatus] = None, limit: int = 500) -> Sequence[dict]:
        raise NotImplementedError
