from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import JustificationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_optional_int, db_cursor, fetchall, fetchone
from .model import Justification, NewJustification
from .repository import JustificationRepository

_COLUMNS = """
    justification_id, attendance_record_id, attendance_status_id, description, status, created_at, submitted_by,
    document_url, document_name, document_type, approved_by, approved_at,
    rejected_by, rejection_reason
"""


def _row_to_justification(r: dict) -> Justification:
    return Justification(
        justification_id=int(r["justification_id"]),
        attendance_record_id=int(r["attendance_record_id"]),
        attendance_status_id=as_optional_int(r.get("attendance_status_id")),
        description=r["description"],
        status=JustificationStatus(r["status"]),
        created_at=r["created_at"],
        submitted_by=as_optional_int(r.get("submitted_by")),
        document_url=r.get("document_url"),
        document_name=r.get("document_name"),
        document_type=r.get("document_type"),
        approved_by=as_optional_int(r.get("approved_by")),
        approved_at=r.get("approved_at"),
        rejected_by=as_optional_int(r.get("rejected_by")),
        rejection_reason=r.get("rejection_reason"),
    )


class MySQLJustificationRepository(JustificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_justification(self, new: NewJustification) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO justifications(
                    attendance_record_id, attendance_status_id, description, status, submitted_by,
                    document_url, document_name, document_type
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(new.attendance_record_id),
                    new.attendance_status_id,
                    new.description,
                    JustificationStatus.PENDING.value,
                    new.submitted_by,
                    new.document_url,
                    new.document_name,
                    new.document_type,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, justification_id: int) -> Optional[Justification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM justifications WHERE justification_id=%s", (int(justification_id),))
            r = fetchone(cur)
            return _row_to_justification(r) if r else None

    def get_justification(self, attendance_record_id: int) -> Optional[Justification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM justifications
                WHERE attendance_record_id=%s
                ORDER BY created_at DESC, justification_id DESC
                LIMIT 1
                """,
                (int(attendance_record_id),),
            )
            r = fetchone(cur)
            return _row_to_justification(r) if r else None

    def list_justifications(
        self,
        *,
        status: Optional[JustificationStatus] = None,
        attendance_record_id: Optional[int] = None,
        attendance_status_ids: Optional[Sequence[int]] = None,
        limit: int = 200,
    ) -> Sequence[Justification]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if attendance_record_id is not None:
            clauses.append("attendance_record_id=%s")
            params.append(int(attendance_record_id))
        if attendance_status_ids is not None:
            ids = [int(i) for i in attendance_status_ids]
            if not ids:
                return []
            clauses.append(f"attendance_status_id IN ({','.join(['%s'] * len(ids))})")
            params.extend(ids)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM justifications
                WHERE {where}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_row_to_justification(r) for r in fetchall(cur)]

    def approve(self, *, justification_id: int, approved_by: int, approved_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE justifications
                SET status=%s, approved_by=%s, approved_at=%s
                WHERE justification_id=%s AND status=%s
                """,
                (
                    JustificationStatus.APPROVED.value,
                    int(approved_by),
                    approved_at,
                    int(justification_id),
                    JustificationStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def reject(self, *, justification_id: int, rejected_by: int, reason: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE justifications
                SET status=%s, rejected_by=%s, rejection_reason=%s
                WHERE justification_id=%s AND status=%s
                """,
                (
                    JustificationStatus.REJECTED.value,
                    int(rejected_by),
                    reason,
                    int(justification_id),
                    JustificationStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def count_by_status(self, *, attendance_record_ids: Optional[Sequence[int]] = None) -> dict:
        where = "1=1"
        params: list[object] = []
        if attendance_record_ids is not None:
            ids = [int(i) for i in attendance_record_ids]
            if not ids:
                return {}
            where = f"attendance_record_id IN ({','.join(['%s'] * len(ids))})"
            params.extend(ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT status, COUNT(*) AS total FROM justifications WHERE {where} GROUP BY status",
                tuple(params),
            )
            return {JustificationStatus(r["status"]): int(r["total"]) for r in fetchall(cur)}
