from __future__ import annotations

from typing import Iterable, Optional

from ..core.enums import JustificationStatus
from ..core.exceptions import NotFoundError
from ..justifications.repository import JustificationRepository
from ..permissions.matrix import PermissionMatrix
from ..permissions.model import CAPABILITY_FLAGS, MatrixCoverage
from ..permissions.repository import PermissionRepository
from ..roles.repository import RoleRepository
from ..statuses.repository import StatusRepository


class PermissionReportService:
    """Read-only projections over the permission table and justifications."""

    def __init__(
        self,
        permissions: PermissionRepository,
        roles: RoleRepository,
        statuses: StatusRepository,
        justifications: JustificationRepository,
        matrix: PermissionMatrix,
    ):
        self._permissions = permissions
        self._roles = roles
        self._statuses = statuses
        self._justifications = justifications
        self._matrix = matrix

    def coverage(self) -> MatrixCoverage:
        return self._matrix.coverage()

    def dashboard_summary(self) -> dict:
        roles = list(self._roles.list_roles(active_only=True))
        statuses = list(self._statuses.list_statuses(active_only=True))
        role_ids = {r.role_id for r in roles}
        status_ids = {s.status_id for s in statuses}

        per_role: dict[int, int] = {r.role_id: 0 for r in roles}
        per_status: dict[int, int] = {s.status_id: 0 for s in statuses}
        total = 0
        for p in self._permissions.list_permissions():
            if p.role_id not in role_ids or p.attendance_status_id not in status_ids:
                continue
            total += 1
            per_role[p.role_id] += 1
            per_status[p.attendance_status_id] += 1

        coverage = MatrixCoverage(total_cells=len(roles) * len(statuses), configured_cells=total)
        roles_without = [{"id": r.role_id, "name": r.name} for r in roles if per_role[r.role_id] == 0]
        statuses_without = [
            {"id": s.status_id, "code": s.code, "name": s.name} for s in statuses if per_status[s.status_id] == 0
        ]
        average = round(total / len(roles), 2) if roles else 0.0

        return {
            "summary": {
                "totalRoles": len(roles),
                "totalStatuses": len(statuses),
                "totalPermissions": total,
                "totalCells": coverage.total_cells,
                "configurationPercentage": coverage.percentage,
            },
            "gaps": {
                "rolesWithoutPermissions": {"count": len(roles_without), "data": roles_without},
                "statusesWithoutPermissions": {"count": len(statuses_without), "data": statuses_without},
            },
            "breakdown": {
                "averagePermissionsPerRole": average,
                "roles": [
                    {
                        "id": r.role_id,
                        "name": r.name,
                        "roleType": r.role_type.value,
                        "permissionCount": per_role[r.role_id],
                    }
                    for r in roles
                ],
            },
        }

    def role_summary(self, role_id: int) -> dict:
        role = self._roles.get_by_id(int(role_id))
        if not role:
            raise NotFoundError("Role not found", detail=f"role_id={role_id}")

        cells = self._matrix.list_for_role(role.role_id)
        counts = {flag: sum(1 for c in cells if getattr(c.permission, flag)) for flag in CAPABILITY_FLAGS}
        return {
            "role": {"id": role.role_id, "name": role.name, "roleType": role.role_type.value},
            "configuredStatuses": len(cells),
            "capabilities": counts,
            "statuses": [
                {"id": c.status.status_id, "code": c.status.code, "permission": c.permission.to_dict()}
                for c in cells
            ],
        }

    def justification_stats(self, attendance_record_ids: Optional[Iterable[int]] = None) -> dict:
        record_ids = None if attendance_record_ids is None else [int(r) for r in attendance_record_ids]
        counts = self._justifications.count_by_status(attendance_record_ids=record_ids)

        stats = {"total": sum(counts.values())}
        for status in JustificationStatus:
            stats[status.value] = counts.get(status, 0)
        return stats
