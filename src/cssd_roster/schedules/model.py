from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import ScheduleStatus


@dataclass(frozen=True)
class ScheduleEntry:
    """One employee's assignment for one calendar day (unique per user/date)."""

    schedule_id: int
    user_id: int
    work_date: date
    unit_id: Optional[int] = None
    shift_id: Optional[int] = None
    status: ScheduleStatus = ScheduleStatus.SCHEDULED
    notes: Optional[str] = None

    @property
    def payload(self) -> "SchedulePayload":
        return SchedulePayload.of(self)

    def to_dict(self) -> dict:
        return {
            "id": self.schedule_id,
            "user_id": self.user_id,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "unit_id": self.unit_id,
            "shift_id": self.shift_id,
            "status": self.status.value,
            "notes": self.notes or "",
        }


@dataclass(frozen=True)
class SchedulePayload:
    """The exchangeable part of an entry: what someone does on that day.

    Built once per entry (or from ``DEFAULT_ABSENCE_PAYLOAD`` for a day without
    an entry) and never mutated, so a settlement can capture every payload
    before issuing its first write.
    """

    unit_id: Optional[int]
    shift_id: Optional[int]
    status: ScheduleStatus
    notes: str = ""

    @classmethod
    def of(cls, entry: Optional[ScheduleEntry]) -> "SchedulePayload":
        if entry is None:
            return DEFAULT_ABSENCE_PAYLOAD
        return cls(
            unit_id=entry.unit_id,
            shift_id=entry.shift_id,
            status=entry.status,
            notes=entry.notes or "",
        )


# A day with no schedule entry is an implicit day off.
DEFAULT_ABSENCE_PAYLOAD = SchedulePayload(unit_id=None, shift_id=None, status=ScheduleStatus.LEAVE, notes="")
