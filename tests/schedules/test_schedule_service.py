from __future__ import annotations

from datetime import date

import pytest

from cssd_roster.core.enums import Role, ScheduleStatus
from cssd_roster.core.exceptions import AuthorizationError, NotFoundError, ValidationError

ADMIN = 1
A, B = 10, 20
PAGI, SIANG, MALAM = 1, 2, 3
DEKONTAMINASI, PACKING = 1, 2


@pytest.fixture
def service(container):
    return container.schedule_service


def test_assign_creates_then_replaces_the_same_day(service, schedules):
    first = service.assign(
        current_role=Role.ADMIN,
        current_user_id=ADMIN,
        user_id=A,
        work_date=date(2026, 2, 2),
        unit_id=DEKONTAMINASI,
        shift_id=PAGI,
    )
    second = service.assign(
        current_role=Role.SUPERVISOR,
        current_user_id=ADMIN,
        user_id=str(A),
        work_date=date(2026, 2, 2),
        unit_id=PACKING,
        shift_id=MALAM,
        notes="  cover for Budi ",
    )

    assert first.schedule_id == second.schedule_id
    assert len(schedules.entries) == 1
    stored = schedules.entries[first.schedule_id]
    assert (stored.unit_id, stored.shift_id, stored.status, stored.notes) == (
        PACKING,
        MALAM,
        ScheduleStatus.SCHEDULED,
        "cover for Budi",
    )


def test_assign_rejects_unknown_catalog_entries(service, schedules):
    with pytest.raises(ValidationError, match="Shift"):
        service.assign(current_role=Role.ADMIN, current_user_id=ADMIN, user_id=A, work_date=date(2026, 2, 2), shift_id=99)
    with pytest.raises(ValidationError, match="Unit"):
        service.assign(current_role=Role.ADMIN, current_user_id=ADMIN, user_id=A, work_date=date(2026, 2, 2), unit_id=99)
    with pytest.raises(ValidationError, match="status"):
        service.assign(current_role=Role.ADMIN, current_user_id=ADMIN, user_id=A, work_date=date(2026, 2, 2), status="sleeping")
    assert schedules.entries == {}


def test_staff_cannot_manage_schedules(service, schedules):
    schedules.add(schedule_id=5, user_id=A, work_date=date(2026, 2, 2), shift_id=PAGI)

    with pytest.raises(AuthorizationError):
        service.assign(current_role=Role.STAFF, current_user_id=A, user_id=A, work_date=date(2026, 2, 3))
    with pytest.raises(AuthorizationError):
        service.update(current_role=Role.STAFF, schedule_id=5, shift_id=MALAM)
    with pytest.raises(AuthorizationError):
        service.delete(current_role=Role.STAFF, schedule_id=5)
    with pytest.raises(AuthorizationError):
        service.list_all(current_role=Role.STAFF)
    assert schedules.entries[5].shift_id == PAGI


def test_bulk_assign_collects_per_item_errors(service, schedules):
    result = service.bulk_assign(
        current_role=Role.ADMIN,
        current_user_id=ADMIN,
        items=[
            {"userId": A, "date": "2026-02-02", "shiftId": PAGI, "unitId": DEKONTAMINASI},
            {"userId": B, "date": "02/02/2026", "shiftId": PAGI},
            {"userId": B, "date": "2026-02-02", "shiftId": 42},
            {"userId": B, "date": "2026-02-03", "status": "leave"},
        ],
    )

    assert len(result.saved) == 2
    assert len(result.errors) == 2
    assert result.errors[0]["schedule"]["date"] == "02/02/2026"
    assert "Shift 42" in result.errors[1]["error"]
    assert len(schedules.entries) == 2
    assert schedules.on(B, date(2026, 2, 3)).status == ScheduleStatus.LEAVE


def test_bulk_assign_requires_a_list(service):
    with pytest.raises(ValidationError):
        service.bulk_assign(current_role=Role.ADMIN, current_user_id=ADMIN, items=[])
    with pytest.raises(ValidationError):
        service.bulk_assign(current_role=Role.ADMIN, current_user_id=ADMIN, items=None)


def test_update_keeps_fields_that_are_not_given(service, schedules):
    schedules.add(schedule_id=5, user_id=A, work_date=date(2026, 2, 2), unit_id=DEKONTAMINASI, shift_id=PAGI, notes="x")

    updated = service.update(current_role=Role.ADMIN, schedule_id=5, shift_id=SIANG)

    assert (updated.unit_id, updated.shift_id, updated.notes) == (DEKONTAMINASI, SIANG, "x")
    assert schedules.entries[5].shift_id == SIANG
    assert schedules.entries[5].unit_id == DEKONTAMINASI

    service.update(current_role=Role.ADMIN, schedule_id=5, status="completed", notes="")
    assert schedules.entries[5].status == ScheduleStatus.COMPLETED
    assert schedules.entries[5].notes == ""


def test_update_and_delete_missing_schedule(service):
    with pytest.raises(NotFoundError):
        service.update(current_role=Role.ADMIN, schedule_id=404, shift_id=PAGI)
    with pytest.raises(NotFoundError):
        service.delete(current_role=Role.ADMIN, schedule_id=404)


def test_delete_removes_entry(service, schedules):
    schedules.add(schedule_id=5, user_id=A, work_date=date(2026, 2, 2), shift_id=PAGI)

    service.delete(current_role=Role.ADMIN, schedule_id=5)

    assert schedules.entries == {}


def test_my_schedule_is_ascending_and_own_only(service, schedules):
    schedules.add(user_id=A, work_date=date(2026, 2, 4), shift_id=PAGI)
    schedules.add(user_id=A, work_date=date(2026, 2, 2), shift_id=MALAM)
    schedules.add(user_id=B, work_date=date(2026, 2, 3), shift_id=PAGI)
    schedules.add(user_id=A, work_date=date(2026, 3, 1), shift_id=PAGI)

    rows = service.my_schedule(user_id=A, start=date(2026, 2, 1), end=date(2026, 2, 28))

    assert [r["date"] for r in rows] == ["2026-02-02", "2026-02-04"]


def test_date_range_must_not_be_reversed(service):
    with pytest.raises(ValidationError):
        service.my_schedule(user_id=A, start=date(2026, 2, 5), end=date(2026, 2, 1))
    with pytest.raises(ValidationError):
        service.list_all(current_role=Role.ADMIN, start=date(2026, 2, 5), end=date(2026, 2, 1))


def test_list_all_filters_by_shift(service, schedules):
    schedules.add(user_id=A, work_date=date(2026, 2, 2), shift_id=PAGI)
    schedules.add(user_id=B, work_date=date(2026, 2, 2), shift_id=MALAM)
    schedules.add(user_id=B, work_date=date(2026, 2, 3), shift_id=PAGI)

    rows = service.list_all(current_role=Role.SUPERVISOR, shift_id=str(PAGI))

    assert [(r["user_id"], r["date"]) for r in rows] == [(B, "2026-02-03"), (A, "2026-02-02")]


def test_non_text_notes_and_dates_are_validation_errors(service, schedules):
    with pytest.raises(ValidationError, match="Notes"):
        service.assign(current_role=Role.ADMIN, current_user_id=ADMIN, user_id=A, work_date=date(2026, 2, 2), notes=5)

    schedules.add(schedule_id=5, user_id=A, work_date=date(2026, 2, 2), shift_id=PAGI, notes="x")
    with pytest.raises(ValidationError, match="Notes"):
        service.update(current_role=Role.ADMIN, schedule_id=5, notes=["x"])
    assert schedules.entries[5].notes == "x"

    result = service.bulk_assign(
        current_role=Role.ADMIN,
        current_user_id=ADMIN,
        items=[{"userId": B, "date": 20260105, "shiftId": PAGI}, {"userId": "²", "date": "2026-01-05"}],
    )
    assert result.saved == []
    assert len(result.errors) == 2
    assert "Invalid date" in result.errors[0]["error"]
