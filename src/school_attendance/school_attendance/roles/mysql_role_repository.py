from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import RoleType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import Role
from .repository import RoleRepository


def _row_to_role(r: dict) -> Role:
    return Role(
        role_id=int(r["role_id"]),
        name=r["name"],
        role_type=RoleType(r["role_type"]),
        is_active=as_bool(r["is_active"]),
    )


class MySQLRoleRepository(RoleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, role_id: int) -> Optional[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT role_id, name, role_type, is_active FROM roles WHERE role_id=%s",
                (int(role_id),),
            )
            r = fetchone(cur)
            return _row_to_role(r) if r else None

    def list_roles(self, *, active_only: bool = True) -> Sequence[Role]:
        where = "WHERE is_active=1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT role_id, name, role_type, is_active FROM roles {where} ORDER BY name")
            return [_row_to_role(r) for r in fetchall(cur)]
