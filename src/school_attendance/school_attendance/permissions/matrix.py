from __future__ import annotations

from typing import Optional

from ..core.enums import RoleType
from ..roles.repository import RoleRepository
from ..statuses.repository import StatusRepository
from .model import AttendancePermission, MatrixCoverage, MatrixRow, RolePermission, StatusPermission
from .repository import PermissionRepository


class PermissionMatrix:
    """Read-only view of the role x attendance-status permission table.

    Default-deny: a pair with no stored row resolves to None. Every call reads
    the stores, so a freshly refreshed table is picked up immediately.
    """

    def __init__(self, permissions: PermissionRepository, roles: RoleRepository, statuses: StatusRepository):
        self._permissions = permissions
        self._roles = roles
        self._statuses = statuses

    def resolve(self, role_id: int, status_id: int) -> Optional[AttendancePermission]:
        return self._permissions.get_permission(int(role_id), int(status_id))

    def list_for_role(self, role_id: int) -> list[StatusPermission]:
        by_status = {p.attendance_status_id: p for p in self._permissions.list_permissions(role_id=int(role_id))}
        return [
            StatusPermission(status=s, permission=by_status[s.status_id])
            for s in self._statuses.list_statuses(active_only=True)
            if s.status_id in by_status
        ]

    def allowed_statuses(self, role_id: int) -> list[StatusPermission]:
        return [sp for sp in self.list_for_role(role_id) if sp.permission.can_view]

    def approvable(self, role_id: int) -> list[AttendancePermission]:
        return list(self._permissions.list_permissions(role_id=int(role_id), can_approve=True))

    def list_for_status(self, status_id: int) -> list[RolePermission]:
        """Active roles holding a row for the status, in role order."""
        by_role = {
            p.role_id: p for p in self._permissions.list_permissions(attendance_status_id=int(status_id))
        }
        return [
            RolePermission(role=r, permission=by_role[r.role_id])
            for r in self._roles.list_roles(active_only=True)
            if r.role_id in by_role
        ]

    def coverage(self) -> MatrixCoverage:
        role_ids = {r.role_id for r in self._roles.list_roles(active_only=True)}
        status_ids = {s.status_id for s in self._statuses.list_statuses(active_only=True)}
        configured = sum(
            1
            for p in self._permissions.list_permissions()
            if p.role_id in role_ids and p.attendance_status_id in status_ids
        )
        return MatrixCoverage(total_cells=len(role_ids) * len(status_ids), configured_cells=configured)

    def grid(self, *, role_type: Optional[RoleType] = None) -> tuple[list, list[MatrixRow]]:
        """Full matrix: (statuses, rows) with None for unconfigured cells."""
        statuses = list(self._statuses.list_statuses(active_only=True))
        roles = [r for r in self._roles.list_roles(active_only=True) if role_type is None or r.role_type == role_type]
        cells = {p.key: p for p in self._permissions.list_permissions()}

        rows = [
            MatrixRow(role=r, cells=tuple(cells.get((r.role_id, s.status_id)) for s in statuses))
            for r in roles
        ]
        return statuses, rows
