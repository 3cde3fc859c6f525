from __future__ import annotations

from datetime import date, datetime

from cssd_roster.core.enums import ScheduleStatus, SwapStatus
from cssd_roster.schedules.model import DEFAULT_ABSENCE_PAYLOAD, ScheduleEntry, SchedulePayload
from cssd_roster.swaps.model import SwapRequest
from cssd_roster.swaps.settlement import plan_settlement

D1 = date(2026, 1, 5)
D2 = date(2026, 1, 6)


def _req(requester_id=10, target_id=20, ra1_id=501, rb2_id=502) -> SwapRequest:
    return SwapRequest(
        swap_id=7,
        requester_id=requester_id,
        requester_schedule_id=ra1_id,
        target_id=target_id,
        target_schedule_id=rb2_id,
        reason="family event",
        status=SwapStatus.PENDING,
        created_at=datetime(2026, 1, 1, 8, 0, 0),
    )


def _entry(schedule_id, user_id, work_date, unit_id, shift_id, notes=""):
    return ScheduleEntry(
        schedule_id=schedule_id,
        user_id=user_id,
        work_date=work_date,
        unit_id=unit_id,
        shift_id=shift_id,
        status=ScheduleStatus.SCHEDULED,
        notes=notes,
    )


def test_absence_payload_is_an_empty_leave_day():
    assert DEFAULT_ABSENCE_PAYLOAD == SchedulePayload(unit_id=None, shift_id=None, status=ScheduleStatus.LEAVE, notes="")
    assert SchedulePayload.of(None) is DEFAULT_ABSENCE_PAYLOAD


def test_payload_of_entry_normalizes_missing_notes():
    entry = ScheduleEntry(schedule_id=1, user_id=10, work_date=D1, unit_id=2, shift_id=1, notes=None)
    assert SchedulePayload.of(entry).notes == ""


def test_different_days_with_absent_counterparts_plans_two_updates_and_two_inserts():
    ra1 = _entry(501, 10, D1, unit_id=1, shift_id=1)
    rb2 = _entry(502, 20, D2, unit_id=2, shift_id=3)

    s = plan_settlement(_req(), ra1=ra1, rb2=rb2, rb1=None, ra2=None)

    assert not s.same_day
    assert (s.date1, s.date2) == (D1, D2)
    assert len(s.writes) == 4
    assert len(s.updates) == 2
    assert len(s.inserts) == 2

    by_key = {(w.user_id, w.work_date): w for w in s.writes}
    # A gives up day 1 and takes B's day 2.
    assert by_key[(10, D1)].schedule_id == 501
    assert by_key[(10, D1)].payload == DEFAULT_ABSENCE_PAYLOAD
    assert by_key[(10, D2)].is_insert
    assert by_key[(10, D2)].payload == SchedulePayload(unit_id=2, shift_id=3, status=ScheduleStatus.SCHEDULED)
    # B takes A's day 1 and gives up day 2.
    assert by_key[(20, D1)].is_insert
    assert by_key[(20, D1)].payload == SchedulePayload(unit_id=1, shift_id=1, status=ScheduleStatus.SCHEDULED)
    assert by_key[(20, D2)].schedule_id == 502
    assert by_key[(20, D2)].payload == DEFAULT_ABSENCE_PAYLOAD


def test_existing_counterparts_are_updated_in_place():
    ra1 = _entry(501, 10, D1, unit_id=1, shift_id=1, notes="a1")
    rb2 = _entry(502, 20, D2, unit_id=2, shift_id=3, notes="b2")
    rb1 = _entry(601, 20, D1, unit_id=3, shift_id=2, notes="b1")
    ra2 = _entry(602, 10, D2, unit_id=1, shift_id=2, notes="a2")

    s = plan_settlement(_req(), ra1=ra1, rb2=rb2, rb1=rb1, ra2=ra2)

    assert s.inserts == ()
    payload_by_id = {w.schedule_id: w.payload for w in s.writes}
    assert payload_by_id[501] == rb1.payload
    assert payload_by_id[601] == ra1.payload
    assert payload_by_id[502] == ra2.payload
    assert payload_by_id[602] == rb2.payload


def test_same_day_swap_exchanges_once_and_ignores_second_lookup():
    ra1 = _entry(501, 10, D1, unit_id=1, shift_id=1)
    rb2 = _entry(502, 20, D1, unit_id=2, shift_id=3)
    stray = _entry(999, 10, D1, unit_id=9, shift_id=9)

    s = plan_settlement(_req(), ra1=ra1, rb2=rb2, rb1=rb2, ra2=stray)

    assert s.same_day
    assert len(s.writes) == 2
    payload_by_id = {w.schedule_id: w.payload for w in s.writes}
    assert payload_by_id == {501: rb2.payload, 502: ra1.payload}


def test_dates_compare_by_calendar_day_only():
    ra1 = _entry(501, 10, datetime(2026, 1, 5, 0, 0), unit_id=1, shift_id=1)
    rb2 = _entry(502, 20, datetime(2026, 1, 5, 23, 59), unit_id=2, shift_id=3)

    s = plan_settlement(_req(), ra1=ra1, rb2=rb2, rb1=rb2, ra2=None)

    assert s.same_day
    assert s.date1 == D1
    assert all(w.work_date == D1 for w in s.writes)


def test_payloads_are_captured_before_any_write():
    ra1 = _entry(501, 10, D1, unit_id=1, shift_id=1)
    rb1 = _entry(601, 20, D1, unit_id=3, shift_id=2)
    rb2 = _entry(502, 20, D2, unit_id=2, shift_id=3)

    s = plan_settlement(_req(), ra1=ra1, rb2=rb2, rb1=rb1, ra2=None)

    # Each side receives the other's original payload, never its own.
    for w in s.writes:
        if w.schedule_id == 501:
            assert w.payload.shift_id == 2
        if w.schedule_id == 601:
            assert w.payload.shift_id == 1
