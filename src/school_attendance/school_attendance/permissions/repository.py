from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendancePermission


class PermissionRepository(Protocol):
    def get_permission(self, role_id: int, attendance_status_id: int) -> Optional[AttendancePermission]:
        """Return the stored row, or None when the pair was never configured."""

        raise NotImplementedError

    def list_permissions(
        self,
        *,
        role_id: Optional[int] = None,
        attendance_status_id: Optional[int] = None,
        can_approve: Optional[bool] = None,
    ) -> Sequence[AttendancePermission]:
        raise NotImplementedError

    def upsert_permission(self, permission: AttendancePermission) -> None:
        raise NotImplementedError

    def delete_permission(self, role_id: int, attendance_status_id: int) -> bool:
        raise NotImplementedError

    def delete_for_role(self, role_id: int) -> int:
        """Remove every row of the role; returns how many were deleted."""

        raise NotImplementedError
