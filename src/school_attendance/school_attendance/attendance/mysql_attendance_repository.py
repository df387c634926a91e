from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_optional_int, db_cursor, fetchone
from .model import DailyAttendanceRecord
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_record(self, attendance_id: int) -> Optional[DailyAttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, student_id, work_date, attendance_status_id,
                       recorded_by, notes, justification_id, version
                FROM daily_attendance_records
                WHERE attendance_id=%s
                """,
                (int(attendance_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return DailyAttendanceRecord(
                attendance_id=int(r["attendance_id"]),
                student_id=int(r["student_id"]),
                work_date=r["work_date"],
                attendance_status_id=as_optional_int(r.get("attendance_status_id")),
                recorded_by=as_optional_int(r.get("recorded_by")),
                notes=r.get("notes"),
                justification_id=as_optional_int(r.get("justification_id")),
                version=int(r["version"]),
            )

    def update_record_status(
        self,
        *,
        attendance_id: int,
        status_id: int,
        notes: Optional[str],
        justification_id: Optional[int],
        recorded_by: Optional[int],
        expected_version: int,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE daily_attendance_records
                SET attendance_status_id=%s, notes=%s, justification_id=%s,
                    recorded_by=%s, version=version+1, updated_at=NOW()
                WHERE attendance_id=%s AND version=%s
                """,
                (
                    int(status_id),
                    notes,
                    justification_id,
                    recorded_by,
                    int(attendance_id),
                    int(expected_version),
                ),
            )
            return cur.rowcount > 0

    def link_justification(self, *, attendance_id: int, justification_id: int, expected_version: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE daily_attendance_records
                SET justification_id=%s, version=version+1, updated_at=NOW()
                WHERE attendance_id=%s AND version=%s
                """,
                (int(justification_id), int(attendance_id), int(expected_version)),
            )
            return cur.rowcount > 0
