from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_optional_int, db_cursor, fetchall, fetchone
from .model import AttendancePermission
from .repository import PermissionRepository

_COLUMNS = """
    role_id, attendance_status_id, can_view, can_create, can_modify, can_delete,
    can_approve, can_add_justification, justification_required, requires_notes,
    min_notes_length, max_notes_length, notes
"""


def _row_to_permission(r: dict) -> AttendancePermission:
    return AttendancePermission(
        role_id=int(r["role_id"]),
        attendance_status_id=int(r["attendance_status_id"]),
        can_view=as_bool(r["can_view"]),
        can_create=as_bool(r["can_create"]),
        can_modify=as_bool(r["can_modify"]),
        can_delete=as_bool(r["can_delete"]),
        can_approve=as_bool(r["can_approve"]),
        can_add_justification=as_bool(r["can_add_justification"]),
        justification_required=as_bool(r["justification_required"]),
        requires_notes=as_bool(r["requires_notes"]),
        min_notes_length=as_optional_int(r.get("min_notes_length")),
        max_notes_length=as_optional_int(r.get("max_notes_length")),
        notes=r.get("notes"),
    )


class MySQLPermissionRepository(PermissionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_permission(self, role_id: int, attendance_status_id: int) -> Optional[AttendancePermission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_permissions
                WHERE role_id=%s AND attendance_status_id=%s
                """,
                (int(role_id), int(attendance_status_id)),
            )
            r = fetchone(cur)
            return _row_to_permission(r) if r else None

    def list_permissions(
        self,
        *,
        role_id: Optional[int] = None,
        attendance_status_id: Optional[int] = None,
        can_approve: Optional[bool] = None,
    ) -> Sequence[AttendancePermission]:
        clauses = ["1=1"]
        params: list[object] = []

        if role_id is not None:
            clauses.append("role_id=%s")
            params.append(int(role_id))
        if attendance_status_id is not None:
            clauses.append("attendance_status_id=%s")
            params.append(int(attendance_status_id))
        if can_approve is not None:
            clauses.append("can_approve=%s")
            params.append(int(bool(can_approve)))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_permissions
                WHERE {where}
                ORDER BY role_id, attendance_status_id
                """,
                tuple(params),
            )
            return [_row_to_permission(r) for r in fetchall(cur)]

    def upsert_permission(self, permission: AttendancePermission) -> None:
        p = permission
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_permissions(
                    role_id, attendance_status_id, can_view, can_create, can_modify, can_delete,
                    can_approve, can_add_justification, justification_required, requires_notes,
                    min_notes_length, max_notes_length, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    can_view=VALUES(can_view), can_create=VALUES(can_create),
                    can_modify=VALUES(can_modify), can_delete=VALUES(can_delete),
                    can_approve=VALUES(can_approve), can_add_justification=VALUES(can_add_justification),
                    justification_required=VALUES(justification_required),
                    requires_notes=VALUES(requires_notes),
                    min_notes_length=VALUES(min_notes_length), max_notes_length=VALUES(max_notes_length),
                    notes=VALUES(notes)
                """,
                (
                    int(p.role_id),
                    int(p.attendance_status_id),
                    int(p.can_view),
                    int(p.can_create),
                    int(p.can_modify),
                    int(p.can_delete),
                    int(p.can_approve),
                    int(p.can_add_justification),
                    int(p.justification_required),
                    int(p.requires_notes),
                    p.min_notes_length,
                    p.max_notes_length,
                    p.notes,
                ),
            )

    def delete_permission(self, role_id: int, attendance_status_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance_permissions WHERE role_id=%s AND attendance_status_id=%s",
                (int(role_id), int(attendance_status_id)),
            )
            return cur.rowcount > 0

    def delete_for_role(self, role_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_permissions WHERE role_id=%s", (int(role_id),))
            return int(cur.rowcount)
