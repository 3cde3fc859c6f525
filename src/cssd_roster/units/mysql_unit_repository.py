from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Unit
from .repository import UnitRepository

_COLUMNS = "unit_id, code, name, description, color, is_active"


def _row_to_unit(r: dict) -> Unit:
    return Unit(
        unit_id=int(r["unit_id"]),
        code=r["code"],
        name=r["name"],
        description=r.get("description"),
        color=r.get("color") or "#3B82F6",
        is_active=bool(r.get("is_active", True)),
    )


class MySQLUnitRepository(UnitRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self) -> Sequence[Unit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM units WHERE is_active=1 ORDER BY name")
            return [_row_to_unit(r) for r in fetchall(cur)]

    def get_by_id(self, unit_id: int) -> Optional[Unit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM units WHERE unit_id=%s", (int(unit_id),))
            r = fetchone(cur)
            return _row_to_unit(r) if r else None
