from __future__ import annotations

import logging
from typing import Iterable, Mapping

from ..common.results import BulkOperationResult
from ..core.enums import RoleType
from ..core.exceptions import AuthorizationError, ConflictError, DomainError, NotFoundError, ValidationError
from ..roles.model import Role
from ..roles.repository import RoleRepository
from ..statuses.repository import StatusRepository
from .model import AttendancePermission
from .repository import PermissionRepository
from .templates import template_for

logger = logging.getLogger(__name__)


def validate_bounds(permission: AttendancePermission) -> AttendancePermission:
    lo, hi = permission.min_notes_length, permission.max_notes_length
    if lo is not None and lo < 0:
        raise ValidationError("minimum notes length cannot be negative", rule="minNotesLength")
    if hi is not None and hi < 0:
        raise ValidationError("maximum notes length cannot be negative", rule="maxNotesLength")
    if lo is not None and hi is not None and lo > hi:
        raise ValidationError(
            "minimum notes length exceeds maximum",
            rule="minNotesLength",
            detail=f"{lo} > {hi}",
        )
    return permission


class PermissionAdminService:
    """Use case: administrators maintain the permission table."""

    def __init__(self, permissions: PermissionRepository, roles: RoleRepository, statuses: StatusRepository):
        self._permissions = permissions
        self._roles = roles
        self._statuses = statuses

    def _require_admin(self, actor_role_id: int) -> None:
        actor = self._roles.get_by_id(int(actor_role_id))
        if not actor or not actor.is_active or actor.role_type != RoleType.ADMIN:
            raise AuthorizationError("Only administrators can manage attendance permissions", rule="roleType")

    def _require_role(self, role_id: int) -> Role:
        role = self._roles.get_by_id(int(role_id))
        if not role:
            raise NotFoundError("Role not found", detail=f"role_id={role_id}")
        return role

    def _require_pair(self, role_id: int, status_id: int) -> None:
        self._require_role(role_id)
        if not self._statuses.get_by_id(int(status_id)):
            raise NotFoundError("Attendance status not found", detail=f"attendance_status_id={status_id}")

    def _get_existing(self, role_id: int, status_id: int) -> AttendancePermission:
        existing = self._permissions.get_permission(int(role_id), int(status_id))
        if not existing:
            raise NotFoundError("Permission not found", detail=f"role_id={role_id}, attendance_status_id={status_id}")
        return existing

    def create(self, *, actor_role_id: int, permission: AttendancePermission) -> AttendancePermission:
        self._require_admin(actor_role_id)
        return self._create(permission)

    def _create(self, permission: AttendancePermission) -> AttendancePermission:
        self._require_pair(permission.role_id, permission.attendance_status_id)
        validate_bounds(permission)
        if self._permissions.get_permission(permission.role_id, permission.attendance_status_id):
            raise ConflictError(
                "Permission already exists for this role and status",
                detail=f"role_id={permission.role_id}, attendance_status_id={permission.attendance_status_id}",
            )
        self._permissions.upsert_permission(permission)
        logger.info("Permission created role=%s status=%s", permission.role_id, permission.attendance_status_id)
        return permission

    def update(self, *, actor_role_id: int, role_id: int, status_id: int, **changes) -> AttendancePermission:
        self._require_admin(actor_role_id)
        return self._update(role_id, status_id, changes)

    def _update(self, role_id: int, status_id: int, changes: Mapping) -> AttendancePermission:
        try:
            updated = self._get_existing(role_id, status_id).with_changes(**changes)
        except ValueError as e:
            raise ValidationError("Invalid permission fields", detail=str(e))
        validate_bounds(updated)
        self._permissions.upsert_permission(updated)
        logger.info("Permission updated role=%s status=%s fields=%s", role_id, status_id, sorted(changes))
        return updated

    def upsert(self, *, actor_role_id: int, permission: AttendancePermission) -> AttendancePermission:
        self._require_admin(actor_role_id)
        self._require_pair(permission.role_id, permission.attendance_status_id)
        validate_bounds(permission)
        self._permissions.upsert_permission(permission)
        return permission

    def delete(self, *, actor_role_id: int, role_id: int, status_id: int) -> None:
        self._require_admin(actor_role_id)
        if not self._permissions.delete_permission(int(role_id), int(status_id)):
            raise NotFoundError("Permission not found", detail=f"role_id={role_id}, attendance_status_id={status_id}")
        logger.info("Permission deleted role=%s status=%s", role_id, status_id)

    def delete_for_role(self, *, actor_role_id: int, role_id: int) -> int:
        """Return the role to default-deny on every status."""
        self._require_admin(actor_role_id)
        role = self._require_role(role_id)
        deleted = self._permissions.delete_for_role(role.role_id)
        logger.info("Permissions cleared for role=%s (%d rows)", role.role_id, deleted)
        return deleted

    def bulk_create(self, *, actor_role_id: int, permissions: Iterable[AttendancePermission]) -> BulkOperationResult:
        self._require_admin(actor_role_id)
        result = BulkOperationResult()
        for p in permissions:
            try:
                self._create(p)
                result.succeeded.append(p.to_dict())
            except DomainError as e:
                result.add_failure({"roleId": p.role_id, "attendanceStatusId": p.attendance_status_id}, e)
        return result

    def batch_update(
        self,
        *,
        actor_role_id: int,
        role_id: int,
        updates: Mapping[int, Mapping],
    ) -> BulkOperationResult:
        """Apply {status_id: changes} to one role's permissions."""
        self._require_admin(actor_role_id)
        self._require_role(role_id)
        result = BulkOperationResult()
        for status_id, changes in updates.items():
            try:
                result.succeeded.append(self._update(role_id, status_id, changes).to_dict())
            except DomainError as e:
                result.add_failure({"roleId": int(role_id), "attendanceStatusId": int(status_id)}, e)
        return result

    def template_for(self, role_type: RoleType) -> dict:
        try:
            return template_for(role_type)
        except ValueError:
            raise NotFoundError("Unknown role type", detail=str(role_type))

    def apply_template(self, *, actor_role_id: int, role_id: int) -> list[AttendancePermission]:
        """Create rows for every active status the role has no row for yet."""
        self._require_admin(actor_role_id)
        role = self._require_role(role_id)
        flags = template_for(role.role_type)

        created: list[AttendancePermission] = []
        for status in self._statuses.list_statuses(active_only=True):
            if self._permissions.get_permission(role.role_id, status.status_id):
                continue
            permission = AttendancePermission(
                role_id=role.role_id,
                attendance_status_id=status.status_id,
                justification_required=status.requires_justification,
                **flags,
            )
            self._permissions.upsert_permission(permission)
            created.append(permission)

        logger.info("Template %s applied to role=%s (%d rows)", role.role_type.value, role.role_id, len(created))
        return created
