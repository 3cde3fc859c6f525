from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..database.transaction import Transaction
from .model import ScheduleEntry, SchedulePayload


class ScheduleRepository(Protocol):
    """Schedule store. Every call runs inside the caller's transaction."""

    def find_by_id(self, tx: Transaction, *, schedule_id: int, for_update: bool = False) -> Optional[ScheduleEntry]:
        raise NotImplementedError

    def find_by_employee_and_date(
        self,
        tx: Transaction,
        *,
        user_id: int,
        work_date: date,
        for_update: bool = False,
    ) -> Optional[ScheduleEntry]:
        raise NotImplementedError

    def insert(
        self,
        tx: Transaction,
        *,
        user_id: int,
        work_date: date,
        payload: SchedulePayload,
        created_by: Optional[int] = None,
    ) -> ScheduleEntry:
        """Insert a new entry.

        Raises ConstraintViolation if the user already has an entry that day.
        """

        raise NotImplementedError

    def update_by_id(self, tx: Transaction, *, schedule_id: int, payload: SchedulePayload) -> None:
        raise NotImplementedError

    def upsert(
        self,
        tx: Transaction,
        *,
        user_id: int,
        work_date: date,
        payload: SchedulePayload,
        created_by: Optional[int] = None,
    ) -> ScheduleEntry:
        """Create or replace the entry for (user_id, work_date)."""

        raise NotImplementedError

    def delete(self, tx: Transaction, *, schedule_id: int) -> bool:
        raise NotImplementedError

    def list_range(
        self,
        tx: Transaction,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        user_id: Optional[int] = None,
        unit_id: Optional[int] = None,
        shift_id: Optional[int] = None,
        newest_first: bool = True,
    ) -> Sequence[dict]:
        """List schedules for the API (joined with user/unit/shift)."""

        raise NotImplementedError
