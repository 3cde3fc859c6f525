"""Settlement planning for approved shift swaps.

A swap between the requester's entry RA1 (on ``date1``) and the target's entry
RB2 (on ``date2``) is realised as one or two day-exchanges:

* on ``date1`` the requester and the target trade what they do that day
  (RA1 against the target's entry RB1, which may be absent);
* on ``date2``, when it differs from ``date1``, they trade again (RB2 against
  the requester's entry RA2, which may be absent).

An absent entry counts as ``DEFAULT_ABSENCE_PAYLOAD`` (a day off). The side
that had no entry gets a new row; the side that had one is updated in place so
its schedule id survives. All payloads are captured from the rows as read,
before the first write, so no write ever sees another write's result.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import calendar_day
from ..schedules.model import ScheduleEntry, SchedulePayload
from .model import SwapRequest


@dataclass(frozen=True)
class ScheduleWrite:
    """One row mutation: update ``schedule_id`` in place, or insert when it is None."""

    user_id: int
    work_date: date
    payload: SchedulePayload
    schedule_id: Optional[int] = None

    @property
    def is_insert(self) -> bool:
        return self.schedule_id is None


@dataclass(frozen=True)
class Settlement:
    swap_id: int
    date1: date
    date2: date
    writes: tuple[ScheduleWrite, ...]

    @property
    def same_day(self) -> bool:
        return self.date1 == self.date2

    @property
    def inserts(self) -> tuple[ScheduleWrite, ...]:
        return tuple(w for w in self.writes if w.is_insert)

    @property
    def updates(self) -> tuple[ScheduleWrite, ...]:
        return tuple(w for w in self.writes if not w.is_insert)


def _exchange(
    *,
    day: date,
    holder: ScheduleEntry,
    holder_payload: SchedulePayload,
    other_user_id: int,
    other: Optional[ScheduleEntry],
    other_payload: SchedulePayload,
) -> tuple[ScheduleWrite, ScheduleWrite]:
    give = ScheduleWrite(
        user_id=holder.user_id,
        work_date=day,
        payload=other_payload,
        schedule_id=holder.schedule_id,
    )
    take = ScheduleWrite(
        user_id=other_user_id,
        work_date=day,
        payload=holder_payload,
        schedule_id=other.schedule_id if other is not None else None,
    )
    return give, take


def plan_settlement(
    request: SwapRequest,
    *,
    ra1: ScheduleEntry,
    rb2: ScheduleEntry,
    rb1: Optional[ScheduleEntry],
    ra2: Optional[ScheduleEntry],
) -> Settlement:
    """Compute the writes that exchange the two employees' assignments.

    ``rb1`` is the target's entry on RA1's date and ``ra2`` the requester's
    entry on RB2's date (None when absent). ``ra2`` is ignored when both dates
    are the same calendar day, since the date1 exchange already covers it.
    """

    date1 = calendar_day(ra1.work_date)
    date2 = calendar_day(rb2.work_date)

    # Capture every payload before any write is planned.
    p_ra1 = SchedulePayload.of(ra1)
    p_rb2 = SchedulePayload.of(rb2)
    p_rb1 = SchedulePayload.of(rb1)
    p_ra2 = SchedulePayload.of(ra2)

    writes = list(
        _exchange(
            day=date1,
            holder=ra1,
            holder_payload=p_ra1,
            other_user_id=request.target_id,
            other=rb1,
            other_payload=p_rb1,
        )
    )

    if date1 != date2:
        writes.extend(
            _exchange(
                day=date2,
                holder=rb2,
                holder_payload=p_rb2,
                other_user_id=request.requester_id,
                other=ra2,
                other_payload=p_ra2,
            )
        )

    return Settlement(swap_id=request.swap_id, date1=date1, date2=date2, writes=tuple(writes))
