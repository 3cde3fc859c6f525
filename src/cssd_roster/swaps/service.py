from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..common.datetime_utils import calendar_day, now_local
from ..common.permissions import is_approver, require_approver
from ..common.validators import optional_text, require_positive_int
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import Role, SwapStatus
from ..core.exceptions import InvalidStateError, NotFoundError, ValidationError
from ..database.transaction import Transaction, TransactionManager
from ..schedules.repository import ScheduleRepository
from .model import SwapRequest
from .repository import SwapRepository
from .settlement import Settlement, plan_settlement

logger = logging.getLogger(__name__)


def parse_swap_status(value: Optional[str]) -> Optional[SwapStatus]:
    if not value:
        return None
    try:
        return SwapStatus(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in SwapStatus)
        raise ValidationError(f"Invalid swap status {value!r} (expected one of: {allowed})")


class SwapService:
    """Shift swap negotiation: propose, list, approve (settle), reject, cancel."""

    def __init__(self, tx_manager: TransactionManager, swaps: SwapRepository, schedules: ScheduleRepository):
        self._tx = tx_manager
        self._swaps = swaps
        self._schedules = schedules

    def propose(
        self,
        *,
        requester_id: Any,
        target_id: Any,
        requester_schedule_id: Any,
        target_schedule_id: Any,
        reason: Optional[str] = None,
    ) -> int:
        requester_id = require_positive_int(requester_id, "Requester ID")
        target_id = require_positive_int(target_id, "Target user ID")
        requester_schedule_id = require_positive_int(requester_schedule_id, "Your schedule ID")
        target_schedule_id = require_positive_int(target_schedule_id, "Target schedule ID")
        if requester_id == target_id:
            raise ValidationError("You cannot swap a shift with yourself")

        with self._tx.begin() as tx:
            mine = self._schedules.find_by_id(tx, schedule_id=requester_schedule_id)
            if not mine or mine.user_id != requester_id:
                raise NotFoundError("Your schedule was not found")

            theirs = self._schedules.find_by_id(tx, schedule_id=target_schedule_id)
            if not theirs or theirs.user_id != target_id:
                raise NotFoundError("Target schedule was not found")

            swap_id = self._swaps.insert(
                tx,
                requester_id=requester_id,
                requester_schedule_id=requester_schedule_id,
                target_id=target_id,
                target_schedule_id=target_schedule_id,
                reason=optional_text(reason, "Reason") or "",
            )

        logger.info(
            "Swap %s proposed: user %s schedule %s <-> user %s schedule %s",
            swap_id,
            requester_id,
            requester_schedule_id,
            target_id,
            target_schedule_id,
        )
        return swap_id

    def list_visible(
        self,
        *,
        current_role: Role,
        user_id: int,
        scope: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[dict]:
        """Staff see their own requests; approvers see everything (optionally by status).

        ``scope="mine"`` restricts anyone to their own requests and
        ``scope="pending"`` is shorthand for ``status="pending"``.
        """

        scope = (scope or "").strip().lower() or None
        if scope not in (None, "mine", "pending", "all"):
            raise ValidationError(f"Invalid scope {scope!r}")

        wanted = parse_swap_status(status)
        if scope == "pending":
            wanted = SwapStatus.PENDING

        with self._tx.begin() as tx:
            if scope == "mine" or not is_approver(current_role):
                return self._swaps.list_for_user(tx, user_id=int(user_id), status=wanted, limit=limit)
            return self._swaps.list_by_status(tx, status=wanted, limit=limit)

    def _lock_pending(self, tx: Transaction, swap_id: int) -> SwapRequest:
        req = self._swaps.find_by_id_for_update(tx, swap_id=int(swap_id))
        if not req:
            raise NotFoundError("Swap request not found")
        if not req.is_pending:
            raise InvalidStateError(f"Swap request already processed ({req.status.value})")
        return req

    def _mark(self, tx: Transaction, req: SwapRequest, status: SwapStatus, approver_id: Optional[int]) -> None:
        decided_at = now_local() if approver_id is not None else None
        if not self._swaps.update_status(
            tx,
            swap_id=req.swap_id,
            status=status,
            approver_id=approver_id,
            approved_at=decided_at,
        ):
            raise InvalidStateError("Swap request already processed")

    def approve(self, *, current_role: Role, approver_id: int, swap_id: int) -> Settlement:
        """Settle a pending swap: exchange both employees' assignments in one transaction."""
        require_approver(current_role)

        with self._tx.begin() as tx:
            req = self._lock_pending(tx, swap_id)

            ra1 = self._schedules.find_by_id(tx, schedule_id=req.requester_schedule_id, for_update=True)
            rb2 = self._schedules.find_by_id(tx, schedule_id=req.target_schedule_id, for_update=True)
            if not ra1 or not rb2 or ra1.user_id != req.requester_id or rb2.user_id != req.target_id:
                raise NotFoundError("Related schedules no longer exist")

            date1 = calendar_day(ra1.work_date)
            date2 = calendar_day(rb2.work_date)
            rb1 = self._schedules.find_by_employee_and_date(
                tx, user_id=req.target_id, work_date=date1, for_update=True
            )
            ra2 = None
            if date1 != date2:
                ra2 = self._schedules.find_by_employee_and_date(
                    tx, user_id=req.requester_id, work_date=date2, for_update=True
                )

            settlement = plan_settlement(req, ra1=ra1, rb2=rb2, rb1=rb1, ra2=ra2)
            for write in settlement.writes:
                if write.is_insert:
                    self._schedules.insert(
                        tx,
                        user_id=write.user_id,
                        work_date=write.work_date,
                        payload=write.payload,
                        created_by=int(approver_id),
                    )
                else:
                    self._schedules.update_by_id(tx, schedule_id=write.schedule_id, payload=write.payload)

            self._mark(tx, req, SwapStatus.APPROVED, int(approver_id))

        logger.info(
            "Swap %s approved by %s: %d updates, %d inserts (%s / %s)",
            req.swap_id,
            approver_id,
            len(settlement.updates),
            len(settlement.inserts),
            settlement.date1.isoformat(),
            settlement.date2.isoformat(),
        )
        return settlement

    def reject(self, *, current_role: Role, approver_id: int, swap_id: int) -> None:
        require_approver(current_role)

        with self._tx.begin() as tx:
            req = self._lock_pending(tx, swap_id)
            self._mark(tx, req, SwapStatus.REJECTED, int(approver_id))

        logger.info("Swap %s rejected by %s", req.swap_id, approver_id)

    def cancel(self, *, user_id: int, swap_id: int) -> None:
        """Let the requester withdraw a request that nobody has decided on yet."""
        with self._tx.begin() as tx:
            req = self._swaps.find_by_id_for_update(tx, swap_id=int(swap_id))
            if not req or req.requester_id != int(user_id):
                raise NotFoundError("Swap request not found")
            if not req.is_pending:
                raise InvalidStateError(f"Swap request already processed ({req.status.value})")
            self._mark(tx, req, SwapStatus.CANCELLED, None)

        logger.info("Swap %s cancelled by requester %s", req.swap_id, user_id)
