from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import AttendanceStatus
from .repository import StatusRepository

_COLUMNS = """
    status_id, code, name, description, is_negative, requires_justification,
    is_temporal, is_excused, can_have_notes, color_code, display_order, is_active
"""


def _row_to_status(r: dict) -> AttendanceStatus:
    return AttendanceStatus(
        status_id=int(r["status_id"]),
        code=r["code"],
        name=r["name"],
        description=r.get("description"),
        is_negative=as_bool(r["is_negative"]),
        requires_justification=as_bool(r["requires_justification"]),
        is_temporal=as_bool(r["is_temporal"]),
        is_excused=as_bool(r["is_excused"]),
        can_have_notes=as_bool(r["can_have_notes"]),
        color_code=r.get("color_code") or "#9CA3AF",
        order=int(r.get("display_order") or 0),
        is_active=as_bool(r["is_active"]),
    )


class MySQLStatusRepository(StatusRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, status_id: int) -> Optional[AttendanceStatus]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_statuses WHERE status_id=%s", (int(status_id),))
            r = fetchone(cur)
            return _row_to_status(r) if r else None

    def get_by_code(self, code: str) -> Optional[AttendanceStatus]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_statuses WHERE code=%s", (code,))
            r = fetchone(cur)
            return _row_to_status(r) if r else None

    def list_statuses(self, *, active_only: bool = True) -> Sequence[AttendanceStatus]:
        where = "WHERE is_active=1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_statuses {where} ORDER BY display_order, code")
            return [_row_to_status(r) for r in fetchall(cur)]
