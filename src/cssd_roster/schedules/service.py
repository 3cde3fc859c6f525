from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.permissions import require_approver
from ..common.validators import optional_positive_int, optional_text, require_positive_int
from ..core.enums import Role, ScheduleStatus
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..database.transaction import TransactionManager
from ..shifts.repository import ShiftRepository
from ..units.repository import UnitRepository
from .model import ScheduleEntry, SchedulePayload
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkAssignResult:
    saved: list[ScheduleEntry]
    errors: list[dict]


def parse_status(value: Optional[str], *, default: Optional[ScheduleStatus] = None) -> Optional[ScheduleStatus]:
    if value is None or value == "":
        return default
    try:
        return ScheduleStatus(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in ScheduleStatus)
        raise ValidationError(f"Invalid schedule status {value!r} (expected one of: {allowed})")


class ScheduleService:
    def __init__(
        self,
        tx_manager: TransactionManager,
        schedules: ScheduleRepository,
        shifts: ShiftRepository,
        units: UnitRepository,
    ):
        self._tx = tx_manager
        self._schedules = schedules
        self._shifts = shifts
        self._units = units

    def _check_catalog(self, *, unit_id: Optional[int], shift_id: Optional[int]) -> None:
        if unit_id is not None and not self._units.get_by_id(unit_id):
            raise ValidationError(f"Unit {unit_id} does not exist")
        if shift_id is not None and not self._shifts.get_by_id(shift_id):
            raise ValidationError(f"Shift {shift_id} does not exist")

    def assign(
        self,
        *,
        current_role: Role,
        current_user_id: int,
        user_id: Any,
        work_date: date,
        unit_id: Any = None,
        shift_id: Any = None,
        status: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ScheduleEntry:
        """Create or replace one employee's entry for one day."""
        require_approver(current_role)

        user_id = require_positive_int(user_id, "User ID")
        unit_id = optional_positive_int(unit_id, "Unit ID")
        shift_id = optional_positive_int(shift_id, "Shift ID")
        self._check_catalog(unit_id=unit_id, shift_id=shift_id)

        payload = SchedulePayload(
            unit_id=unit_id,
            shift_id=shift_id,
            status=parse_status(status, default=ScheduleStatus.SCHEDULED),
            notes=optional_text(notes, "Notes") or "",
        )
        with self._tx.begin() as tx:
            return self._schedules.upsert(
                tx,
                user_id=user_id,
                work_date=work_date,
                payload=payload,
                created_by=int(current_user_id),
            )

    def bulk_assign(self, *, current_role: Role, current_user_id: int, items: Sequence[dict]) -> BulkAssignResult:
        """Assign many entries; each item commits on its own and failures are collected."""
        require_approver(current_role)

        if not isinstance(items, (list, tuple)) or not items:
            raise ValidationError("schedules must be a non-empty list")

        saved: list[ScheduleEntry] = []
        errors: list[dict] = []
        for item in items:
            try:
                if not isinstance(item, dict):
                    raise ValidationError("Each schedule must be an object")
                saved.append(
                    self.assign(
                        current_role=current_role,
                        current_user_id=current_user_id,
                        user_id=item.get("userId"),
                        work_date=parse_iso_date(item.get("date") or ""),
                        unit_id=item.get("unitId"),
                        shift_id=item.get("shiftId"),
                        status=item.get("status"),
                        notes=item.get("notes"),
                    )
                )
            except DomainError as e:
                errors.append({"schedule": item, "error": str(e)})

        if errors:
            logger.warning("Bulk assign saved %d schedules, %d failed", len(saved), len(errors))
        return BulkAssignResult(saved=saved, errors=errors)

    def update(
        self,
        *,
        current_role: Role,
        schedule_id: int,
        unit_id: Any = None,
        shift_id: Any = None,
        status: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ScheduleEntry:
        """Partial update: fields left as None keep their stored value."""
        require_approver(current_role)

        unit_id = optional_positive_int(unit_id, "Unit ID")
        shift_id = optional_positive_int(shift_id, "Shift ID")
        new_status = parse_status(status)
        notes = optional_text(notes, "Notes")
        self._check_catalog(unit_id=unit_id, shift_id=shift_id)

        with self._tx.begin() as tx:
            entry = self._schedules.find_by_id(tx, schedule_id=int(schedule_id), for_update=True)
            if not entry:
                raise NotFoundError("Schedule not found")

            current = entry.payload
            payload = SchedulePayload(
                unit_id=unit_id if unit_id is not None else current.unit_id,
                shift_id=shift_id if shift_id is not None else current.shift_id,
                status=new_status or current.status,
                notes=notes if notes is not None else current.notes,
            )
            self._schedules.update_by_id(tx, schedule_id=entry.schedule_id, payload=payload)

        return ScheduleEntry(
            schedule_id=entry.schedule_id,
            user_id=entry.user_id,
            work_date=entry.work_date,
            unit_id=payload.unit_id,
            shift_id=payload.shift_id,
            status=payload.status,
            notes=payload.notes,
        )

    def delete(self, *, current_role: Role, schedule_id: int) -> None:
        require_approver(current_role)

        with self._tx.begin() as tx:
            if not self._schedules.delete(tx, schedule_id=int(schedule_id)):
                raise NotFoundError("Schedule not found")

    def my_schedule(self, *, user_id: int, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[dict]:
        if start and end and end < start:
            raise ValidationError("End date must be on or after start date")

        with self._tx.begin() as tx:
            return self._schedules.list_range(tx, start=start, end=end, user_id=int(user_id), newest_first=False)

    def list_all(
        self,
        *,
        current_role: Role,
        start: Optional[date] = None,
        end: Optional[date] = None,
        user_id: Any = None,
        unit_id: Any = None,
        shift_id: Any = None,
    ) -> Sequence[dict]:
        require_approver(current_role)
        if start and end and end < start:
            raise ValidationError("End date must be on or after start date")

        with self._tx.begin() as tx:
            return self._schedules.list_range(
                tx,
                start=start,
                end=end,
                user_id=optional_positive_int(user_id, "User ID"),
                unit_id=optional_positive_int(unit_id, "Unit ID"),
                shift_id=optional_positive_int(shift_id, "Shift ID"),
            )
