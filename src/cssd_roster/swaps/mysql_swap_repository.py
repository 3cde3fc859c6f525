from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import SwapStatus
from ..database.mysql_base import fetchall, fetchone, normalize_mysql_date
from ..database.transaction import Transaction
from .model import SwapRequest
from .repository import SwapRepository


def _fmt_dt(value: Optional[datetime]) -> Optional[str]:
    return value.strftime("%Y-%m-%d %H:%M") if value else None


class MySQLSwapRepository(SwapRepository):
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
        tx.cursor.execute(
            """
            INSERT INTO shift_swaps(
                requester_id, requester_schedule_id, target_id, target_schedule_id, reason, status
            )
            VALUES(%s,%s,%s,%s,%s,%s)
            """,
            (
                int(requester_id),
                int(requester_schedule_id),
                int(target_id),
                int(target_schedule_id),
                reason,
                SwapStatus.PENDING.value,
            ),
        )
        return int(tx.cursor.lastrowid)

    def find_by_id_for_update(self, tx: Transaction, *, swap_id: int) -> Optional[SwapRequest]:
        tx.cursor.execute(
            """
            SELECT swap_id, requester_id, requester_schedule_id, target_id, target_schedule_id,
                   reason, status, created_at, approved_by, approved_at
            FROM shift_swaps
            WHERE swap_id=%s
            FOR UPDATE
            """,
            (int(swap_id),),
        )
        r = fetchone(tx.cursor)
        if not r:
            return None
        return SwapRequest(
            swap_id=int(r["swap_id"]),
            requester_id=int(r["requester_id"]),
            requester_schedule_id=int(r["requester_schedule_id"]),
            target_id=int(r["target_id"]),
            target_schedule_id=int(r["target_schedule_id"]),
            reason=r.get("reason") or "",
            status=SwapStatus(r["status"]),
            created_at=r["created_at"],
            approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
            approved_at=r.get("approved_at"),
        )

    def update_status(
        self,
        tx: Transaction,
        *,
        swap_id: int,
        status: SwapStatus,
        approver_id: Optional[int],
        approved_at: Optional[datetime],
    ) -> bool:
        tx.cursor.execute(
            """
            UPDATE shift_swaps
            SET status=%s, approved_by=%s, approved_at=%s
            WHERE swap_id=%s AND status=%s
            """,
            (
                status.value,
                approver_id,
                approved_at,
                int(swap_id),
                SwapStatus.PENDING.value,
            ),
        )
        return tx.cursor.rowcount > 0

    def _list(self, tx: Transaction, *, clauses: list[str], params: list[object], limit: int) -> Sequence[dict]:
        where = " AND ".join(clauses)
        tx.cursor.execute(
            f"""
            SELECT
                s.swap_id, s.status, s.reason, s.created_at, s.approved_by, s.approved_at,
                s.requester_id, r.name AS requester_name, r.nip AS requester_nip,
                s.target_id, t.name AS target_name, t.nip AS target_nip,
                s.requester_schedule_id, sc_req.work_date AS requester_date,
                sh_req.name AS requester_shift_name, sh_req.code AS requester_shift_code,
                s.target_schedule_id, sc_target.work_date AS target_date,
                sh_target.name AS target_shift_name, sh_target.code AS target_shift_code
            FROM shift_swaps s
            JOIN users r ON r.user_id = s.requester_id
            JOIN users t ON t.user_id = s.target_id
            JOIN schedules sc_req ON sc_req.schedule_id = s.requester_schedule_id
            LEFT JOIN shifts sh_req ON sh_req.shift_id = sc_req.shift_id
            JOIN schedules sc_target ON sc_target.schedule_id = s.target_schedule_id
            LEFT JOIN shifts sh_target ON sh_target.shift_id = sc_target.shift_id
            WHERE {where}
            ORDER BY s.created_at DESC, s.swap_id DESC
            LIMIT %s
            """,
            tuple(params + [int(limit)]),
        )
        out: list[dict] = []
        for r in fetchall(tx.cursor):
            out.append(
                {
                    "id": int(r["swap_id"]),
                    "status": r["status"],
                    "reason": r.get("reason") or "",
                    "created_at": _fmt_dt(r["created_at"]),
                    "approved_by": r.get("approved_by"),
                    "approved_at": _fmt_dt(r.get("approved_at")),
                    "requester_id": int(r["requester_id"]),
                    "requester_name": r["requester_name"],
                    "requester_nip": r["requester_nip"],
                    "requester_schedule_id": int(r["requester_schedule_id"]),
                    "requester_date": normalize_mysql_date(r["requester_date"]).strftime("%Y-%m-%d"),
                    "requester_shift_name": r.get("requester_shift_name"),
                    "requester_shift_code": r.get("requester_shift_code"),
                    "target_id": int(r["target_id"]),
                    "target_name": r["target_name"],
                    "target_nip": r["target_nip"],
                    "target_schedule_id": int(r["target_schedule_id"]),
                    "target_date": normalize_mysql_date(r["target_date"]).strftime("%Y-%m-%d"),
                    "target_shift_name": r.get("target_shift_name"),
                    "target_shift_code": r.get("target_shift_code"),
                }
            )
        return out

    def list_for_user(
        self,
        tx: Transaction,
        *,
        user_id: int,
        status: Optional[SwapStatus] = None,
        limit: int = 500,
    ) -> Sequence[dict]:
        clauses = ["(s.requester_id=%s OR s.target_id=%s)"]
        params: list[object] = [int(user_id), int(user_id)]
        if status is not None:
            clauses.append("s.status=%s")
            params.append(status.value)
        return self._list(tx, clauses=clauses, params=params, limit=limit)

    def list_by_status(self, tx: Transaction, *, status: Optional[SwapStatus] = None, limit: int = 500) -> Sequence[dict]:
        clauses = ["1=1"]
        params: list[object] = []
        if status is not None:
            clauses.append("s.status=%s")
            params.append(status.value)
        return self._list(tx, clauses=clauses, params=params, limit=limit)
