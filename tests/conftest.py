from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, time, timedelta
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from cssd_roster.container import wire
from cssd_roster.core.enums import Role, ScheduleStatus, SwapStatus
from cssd_roster.core.exceptions import ConstraintViolation
from cssd_roster.schedules.model import ScheduleEntry, SchedulePayload
from cssd_roster.shifts.model import Shift
from cssd_roster.swaps.model import SwapRequest
from cssd_roster.units.model import Unit
from cssd_roster.users.model import User

# Catalog ids used across tests
PAGI, SIANG, MALAM = 1, 2, 3
DEKONTAMINASI, PACKING, STERILISASI = 1, 2, 3


class FakeTransactionManager:
    """Snapshots every registered store on begin and restores them if the block raises."""

    def __init__(self, *stores):
        self._stores = stores
        self.commits = 0
        self.rollbacks = 0
        self.active = None

    @contextmanager
    def begin(self):
        states = [store.snapshot() for store in self._stores]
        tx = object()
        self.active = tx
        try:
            yield tx
        except Exception:
            for store, state in zip(self._stores, states):
                store.restore(state)
            self.rollbacks += 1
            raise
        finally:
            self.active = None
        self.commits += 1


class InMemoryScheduleStore:
    def __init__(self):
        self.entries: dict[int, ScheduleEntry] = {}
        self._next_id = 1
        # (user_id, date) pairs a lookup will not see, as if written by a concurrent transaction.
        self.hidden_from_lookup: set[tuple[int, date]] = set()

    def snapshot(self):
        return copy.deepcopy((self.entries, self._next_id))

    def restore(self, state):
        self.entries, self._next_id = state

    def add(self, *, user_id, work_date, unit_id=None, shift_id=None, status=ScheduleStatus.SCHEDULED, notes="", schedule_id=None):
        sid = schedule_id or self._next_id
        self._next_id = max(self._next_id, sid) + 1
        entry = ScheduleEntry(
            schedule_id=sid,
            user_id=user_id,
            work_date=work_date,
            unit_id=unit_id,
            shift_id=shift_id,
            status=status,
            notes=notes,
        )
        self.entries[sid] = entry
        return entry

    def on(self, user_id: int, work_date: date) -> Optional[ScheduleEntry]:
        for e in self.entries.values():
            if e.user_id == user_id and e.work_date == work_date:
                return e
        return None

    def find_by_id(self, tx, *, schedule_id, for_update=False):
        assert tx is not None
        return self.entries.get(int(schedule_id))

    def find_by_employee_and_date(self, tx, *, user_id, work_date, for_update=False):
        assert tx is not None
        if (user_id, work_date) in self.hidden_from_lookup:
            return None
        return self.on(user_id, work_date)

    def insert(self, tx, *, user_id, work_date, payload: SchedulePayload, created_by=None):
        assert tx is not None
        if self.on(user_id, work_date):
            raise ConstraintViolation(f"duplicate schedule for {user_id} on {work_date}")
        return self.add(
            user_id=user_id,
            work_date=work_date,
            unit_id=payload.unit_id,
            shift_id=payload.shift_id,
            status=payload.status,
            notes=payload.notes,
        )

    def update_by_id(self, tx, *, schedule_id, payload: SchedulePayload):
        assert tx is not None
        e = self.entries[int(schedule_id)]
        self.entries[e.schedule_id] = replace(
            e,
            unit_id=payload.unit_id,
            shift_id=payload.shift_id,
            status=payload.status,
            notes=payload.notes,
        )

    def upsert(self, tx, *, user_id, work_date, payload: SchedulePayload, created_by=None):
        existing = self.on(user_id, work_date)
        if existing:
            self.update_by_id(tx, schedule_id=existing.schedule_id, payload=payload)
            return self.entries[existing.schedule_id]
        return self.insert(tx, user_id=user_id, work_date=work_date, payload=payload, created_by=created_by)

    def delete(self, tx, *, schedule_id):
        return self.entries.pop(int(schedule_id), None) is not None

    def list_range(self, tx, *, start=None, end=None, user_id=None, unit_id=None, shift_id=None, newest_first=True):
        rows = [
            e
            for e in self.entries.values()
            if (start is None or e.work_date >= start)
            and (end is None or e.work_date <= end)
            and (user_id is None or e.user_id == user_id)
            and (unit_id is None or e.unit_id == unit_id)
            and (shift_id is None or e.shift_id == shift_id)
        ]
        rows.sort(key=lambda e: (e.work_date, e.user_id), reverse=newest_first)
        return [e.to_dict() for e in rows]


class InMemorySwapLedger:
    def __init__(self):
        self.requests: dict[int, SwapRequest] = {}
        self._next_id = 1
        self._clock = datetime(2026, 1, 1, 8, 0, 0)

    def snapshot(self):
        return copy.deepcopy((self.requests, self._next_id, self._clock))

    def restore(self, state):
        self.requests, self._next_id, self._clock = state

    def insert(self, tx, *, requester_id, requester_schedule_id, target_id, target_schedule_id, reason):
        assert tx is not None
        sid = self._next_id
        self._next_id += 1
        self._clock += timedelta(minutes=1)
        self.requests[sid] = SwapRequest(
            swap_id=sid,
            requester_id=requester_id,
            requester_schedule_id=requester_schedule_id,
            target_id=target_id,
            target_schedule_id=target_schedule_id,
            reason=reason,
            status=SwapStatus.PENDING,
            created_at=self._clock,
        )
        return sid

    def find_by_id_for_update(self, tx, *, swap_id):
        assert tx is not None
        return self.requests.get(int(swap_id))

    def update_status(self, tx, *, swap_id, status, approver_id, approved_at):
        req = self.requests.get(int(swap_id))
        if not req or req.status != SwapStatus.PENDING:
            return False
        self.requests[req.swap_id] = replace(req, status=status, approved_by=approver_id, approved_at=approved_at)
        return True

    def _rows(self, reqs, status):
        rows = [r for r in reqs if status is None or r.status == status]
        rows.sort(key=lambda r: (r.created_at, r.swap_id), reverse=True)
        return [
            {
                "id": r.swap_id,
                "status": r.status.value,
                "requester_id": r.requester_id,
                "target_id": r.target_id,
                "reason": r.reason,
            }
            for r in rows
        ]

    def list_for_user(self, tx, *, user_id, status=None, limit=500):
        mine = [r for r in self.requests.values() if r.involves(user_id)]
        return self._rows(mine, status)[:limit]

    def list_by_status(self, tx, *, status=None, limit=500):
        return self._rows(self.requests.values(), status)[:limit]


class InMemoryUsers:
    def __init__(self, users):
        self.by_id = {u.user_id: u for u in users}

    def get_by_id(self, user_id):
        return self.by_id.get(int(user_id))

    def get_by_nip(self, nip):
        return next((u for u in self.by_id.values() if u.nip == nip), None)


class InMemoryCatalog:
    def __init__(self, items, id_attr):
        self._items = {getattr(i, id_attr): i for i in items}

    def list_active(self):
        return [i for i in self._items.values() if i.is_active]

    def get_by_id(self, item_id):
        return self._items.get(int(item_id))


def make_user(user_id, nip, name, role, password="secret123"):
    return User(
        user_id=user_id,
        nip=nip,
        name=name,
        email=f"{nip.lower()}@cssd.local",
        password_hash=generate_password_hash(password),
        role=role,
        position="Pelaksana",
    )


@pytest.fixture
def schedules():
    return InMemoryScheduleStore()


@pytest.fixture
def ledger():
    return InMemorySwapLedger()


@pytest.fixture
def tx_manager(schedules, ledger):
    return FakeTransactionManager(schedules, ledger)


@pytest.fixture
def users():
    return InMemoryUsers(
        [
            make_user(1, "ADMIN001", "Administrator", Role.ADMIN),
            make_user(2, "SPV001", "Supervisor", Role.SUPERVISOR),
            make_user(10, "STAFF010", "Ani", Role.STAFF),
            make_user(20, "STAFF020", "Budi", Role.STAFF),
            make_user(30, "STAFF030", "Citra", Role.STAFF),
        ]
    )


@pytest.fixture
def shifts():
    return InMemoryCatalog(
        [
            Shift(shift_id=PAGI, code="PAGI", name="Shift Pagi", start_time=time(7, 0), end_time=time(14, 0)),
            Shift(shift_id=SIANG, code="SIANG", name="Shift Siang", start_time=time(14, 0), end_time=time(21, 0)),
            Shift(shift_id=MALAM, code="MALAM", name="Shift Malam", start_time=time(21, 0), end_time=time(7, 0)),
        ],
        "shift_id",
    )


@pytest.fixture
def units():
    return InMemoryCatalog(
        [
            Unit(unit_id=DEKONTAMINASI, code="DEKONTAMINASI", name="Dekontaminasi"),
            Unit(unit_id=PACKING, code="PACKING", name="Packing"),
            Unit(unit_id=STERILISASI, code="STERILISASI", name="Sterilisasi"),
        ],
        "unit_id",
    )


@pytest.fixture
def container(tx_manager, users, shifts, units, schedules, ledger):
    return wire(
        tx_manager=tx_manager,
        users_repo=users,
        shifts_repo=shifts,
        units_repo=units,
        schedules_repo=schedules,
        swaps_repo=ledger,
    )


@pytest.fixture
def fixed_now(monkeypatch):
    now = datetime(2026, 1, 4, 9, 30, 0)
    monkeypatch.setattr("cssd_roster.swaps.service.now_local", lambda: now)
    return now
