from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import ScheduleStatus
from ..core.exceptions import ConstraintViolation
from ..database.mysql_base import fetchall, fetchone, normalize_mysql_date, normalize_mysql_time
from ..database.transaction import Transaction
from .model import ScheduleEntry, SchedulePayload
from .repository import ScheduleRepository

_COLUMNS = "schedule_id, user_id, work_date, unit_id, shift_id, status, notes"


def _row_to_entry(r: dict) -> ScheduleEntry:
    return ScheduleEntry(
        schedule_id=int(r["schedule_id"]),
        user_id=int(r["user_id"]),
        work_date=normalize_mysql_date(r["work_date"]),
        unit_id=int(r["unit_id"]) if r.get("unit_id") is not None else None,
        shift_id=int(r["shift_id"]) if r.get("shift_id") is not None else None,
        status=ScheduleStatus(r["status"]),
        notes=r.get("notes"),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def find_by_id(self, tx: Transaction, *, schedule_id: int, for_update: bool = False) -> Optional[ScheduleEntry]:
        lock = " FOR UPDATE" if for_update else ""
        tx.cursor.execute(f"SELECT {_COLUMNS} FROM schedules WHERE schedule_id=%s{lock}", (int(schedule_id),))
        r = fetchone(tx.cursor)
        return _row_to_entry(r) if r else None

    def find_by_employee_and_date(
        self,
        tx: Transaction,
        *,
        user_id: int,
        work_date: date,
        for_update: bool = False,
    ) -> Optional[ScheduleEntry]:
        # FOR UPDATE on the unique (user_id, work_date) index also locks the gap
        # when no row exists, blocking a concurrent insert for that day.
        lock = " FOR UPDATE" if for_update else ""
        tx.cursor.execute(
            f"SELECT {_COLUMNS} FROM schedules WHERE user_id=%s AND work_date=%s{lock}",
            (int(user_id), work_date),
        )
        r = fetchone(tx.cursor)
        return _row_to_entry(r) if r else None

    def insert(
        self,
        tx: Transaction,
        *,
        user_id: int,
        work_date: date,
        payload: SchedulePayload,
        created_by: Optional[int] = None,
    ) -> ScheduleEntry:
        try:
            tx.cursor.execute(
                """
                INSERT INTO schedules(user_id, work_date, unit_id, shift_id, status, notes, created_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    work_date,
                    payload.unit_id,
                    payload.shift_id,
                    payload.status.value,
                    payload.notes,
                    created_by,
                ),
            )
        except mysql.connector.IntegrityError as e:
            raise ConstraintViolation(
                f"Schedule for user {user_id} on {work_date.isoformat()} already exists"
            ) from e

        return ScheduleEntry(
            schedule_id=int(tx.cursor.lastrowid),
            user_id=int(user_id),
            work_date=work_date,
            unit_id=payload.unit_id,
            shift_id=payload.shift_id,
            status=payload.status,
            notes=payload.notes,
        )

    def update_by_id(self, tx: Transaction, *, schedule_id: int, payload: SchedulePayload) -> None:
        tx.cursor.execute(
            """
            UPDATE schedules
            SET unit_id=%s, shift_id=%s, status=%s, notes=%s
            WHERE schedule_id=%s
            """,
            (payload.unit_id, payload.shift_id, payload.status.value, payload.notes, int(schedule_id)),
        )

    def upsert(
        self,
        tx: Transaction,
        *,
        user_id: int,
        work_date: date,
        payload: SchedulePayload,
        created_by: Optional[int] = None,
    ) -> ScheduleEntry:
        try:
            tx.cursor.execute(
                """
                INSERT INTO schedules(user_id, work_date, unit_id, shift_id, status, notes, created_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    unit_id=VALUES(unit_id),
                    shift_id=VALUES(shift_id),
                    status=VALUES(status),
                    notes=VALUES(notes)
                """,
                (
                    int(user_id),
                    work_date,
                    payload.unit_id,
                    payload.shift_id,
                    payload.status.value,
                    payload.notes,
                    created_by,
                ),
            )
        except mysql.connector.IntegrityError as e:
            # Only foreign keys can fail here (unknown user/unit/shift).
            raise ConstraintViolation("Schedule references a user, unit or shift that does not exist") from e

        # If it was an update, lastrowid may not be the row id; read it back.
        entry = self.find_by_employee_and_date(tx, user_id=int(user_id), work_date=work_date)
        if entry is None:
            raise ConstraintViolation("Schedule could not be saved")
        return entry

    def delete(self, tx: Transaction, *, schedule_id: int) -> bool:
        tx.cursor.execute("DELETE FROM schedules WHERE schedule_id=%s", (int(schedule_id),))
        return tx.cursor.rowcount > 0

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
        clauses = ["1=1"]
        params: list[object] = []
        if start is not None:
            clauses.append("sc.work_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("sc.work_date <= %s")
            params.append(end)
        if user_id is not None:
            clauses.append("sc.user_id=%s")
            params.append(int(user_id))
        if unit_id is not None:
            clauses.append("sc.unit_id=%s")
            params.append(int(unit_id))
        if shift_id is not None:
            clauses.append("sc.shift_id=%s")
            params.append(int(shift_id))

        where = " AND ".join(clauses)
        order = "sc.work_date DESC, u.name ASC" if newest_first else "sc.work_date ASC, u.name ASC"

        tx.cursor.execute(
            f"""
            SELECT
                sc.schedule_id, sc.work_date, sc.status, sc.notes,
                u.user_id, u.nip, u.name AS user_name, u.position,
                un.unit_id, un.code AS unit_code, un.name AS unit_name, un.color AS unit_color,
                s.shift_id, s.code AS shift_code, s.name AS shift_name,
                s.start_time, s.end_time, s.color AS shift_color
            FROM schedules sc
            JOIN users u ON u.user_id = sc.user_id
            LEFT JOIN units un ON un.unit_id = sc.unit_id
            LEFT JOIN shifts s ON s.shift_id = sc.shift_id
            WHERE {where}
            ORDER BY {order}
            """,
            tuple(params),
        )
        out: list[dict] = []
        for r in fetchall(tx.cursor):
            out.append(
                {
                    "id": int(r["schedule_id"]),
                    "date": normalize_mysql_date(r["work_date"]).strftime("%Y-%m-%d"),
                    "status": r["status"],
                    "notes": r.get("notes") or "",
                    "user": {
                        "id": int(r["user_id"]),
                        "nip": r["nip"],
                        "name": r["user_name"],
                        "position": r.get("position"),
                    },
                    "unit": (
                        {
                            "id": int(r["unit_id"]),
                            "code": r["unit_code"],
                            "name": r["unit_name"],
                            "color": r["unit_color"],
                        }
                        if r.get("unit_id") is not None
                        else None
                    ),
                    "shift": (
                        {
                            "id": int(r["shift_id"]),
                            "code": r["shift_code"],
                            "name": r["shift_name"],
                            "start_time": normalize_mysql_time(r["start_time"]).strftime("%H:%M"),
                            "end_time": normalize_mysql_time(r["end_time"]).strftime("%H:%M"),
                            "color": r["shift_color"],
                        }
                        if r.get("shift_id") is not None
                        else None
                    ),
                }
            )
        return out
