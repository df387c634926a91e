from __future__ import annotations

from flask import Flask, request

from ..common.http import current_actor, int_field, json_body, login_required, ok
from ..common.results import BulkOperationResult
from ..core.enums import RoleType
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..container import Container
from .model import PAYLOAD_FIELDS, AttendancePermission, changes_from_payload


def _changes(data: dict) -> dict:
    try:
        return changes_from_payload(data)
    except (TypeError, ValueError):
        raise ValidationError("notes length bounds must be integers", rule="minNotesLength")


def _parse_permission(data) -> AttendancePermission:
    if not isinstance(data, dict):
        raise ValidationError("each permission must be an object", rule="permissions")
    return AttendancePermission(
        role_id=int_field(data.get("roleId"), "roleId"),
        attendance_status_id=int_field(data.get("attendanceStatusId"), "attendanceStatusId"),
        **_changes(data),
    )


def _parse_items(items: list, parse) -> tuple[list, BulkOperationResult]:
    """Parse each item on its own; unparseable items are reported, not raised."""
    parsed, rejected = [], BulkOperationResult()
    for item in items:
        try:
            parsed.append(parse(item))
        except DomainError as e:
            rejected.add_failure(item, e)
    return parsed, rejected


def _parse_update(data) -> tuple[int, dict]:
    if not isinstance(data, dict):
        raise ValidationError("each permission must be an object", rule="permissions")
    return int_field(data.get("attendanceStatusId"), "attendanceStatusId"), _changes(data)


def _parse_role_type(value: str) -> RoleType:
    try:
        return RoleType(value.upper())
    except ValueError:
        raise NotFoundError("Unknown role type", detail=value)


def register(app: Flask, container: Container) -> None:
    base = "/api/attendance-permissions"

    @app.route(f"{base}/<int:role_id>/<int:status_id>", methods=["GET"], endpoint="get_attendance_permission")
    @login_required
    def get_permission(role_id: int, status_id: int):
        permission = container.permission_matrix.resolve(role_id, status_id)
        if permission is None:
            raise NotFoundError(
                "No permission configured for this role and status",
                rule="permission",
                detail="default-deny",
            )
        return ok(permission.to_dict())

    @app.route(f"{base}/by-role/<int:role_id>", methods=["GET"], endpoint="permissions_by_role")
    @login_required
    def by_role(role_id: int):
        cells = container.permission_matrix.list_for_role(role_id)
        data = [{"status": c.status.to_dict(), "permission": c.permission.to_dict()} for c in cells]
        return ok(data, count=len(data))

    @app.route(f"{base}/allowed-statuses", methods=["GET"], endpoint="allowed_statuses")
    @login_required
    def allowed_statuses():
        role_id, _ = current_actor()
        cells = container.permission_matrix.allowed_statuses(role_id)
        data = [
            dict(
                c.status.to_dict(),
                canCreate=c.permission.can_create,
                canModify=c.permission.can_modify,
                canAddJustification=c.permission.can_add_justification,
                requiresNotes=c.permission.requires_notes,
            )
            for c in cells
        ]
        return ok(data, count=len(data))

    @app.route(f"{base}/matrix", methods=["GET"], endpoint="permission_matrix")
    @login_required
    def matrix():
        role_type = request.args.get("roleType")
        statuses, rows = container.permission_matrix.grid(
            role_type=_parse_role_type(role_type) if role_type else None
        )
        return ok(
            {
                "statuses": [s.to_dict() for s in statuses],
                "roles": [
                    dict(row.role.to_dict(), permissions=[p.to_dict() if p else None for p in row.cells])
                    for row in rows
                ],
            }
        )

    @app.route(base, methods=["POST"], endpoint="create_attendance_permission")
    @login_required
    def create_permission():
        role_id, _ = current_actor()
        permission = container.permission_admin_service.create(
            actor_role_id=role_id,
            permission=_parse_permission(json_body()),
        )
        return ok(permission.to_dict(), status=201)

    @app.route(f"{base}/<int:role_id>/<int:status_id>", methods=["PATCH"], endpoint="update_attendance_permission")
    @login_required
    def update_permission(role_id: int, status_id: int):
        actor_role_id, _ = current_actor()
        permission = container.permission_admin_service.update(
            actor_role_id=actor_role_id,
            role_id=role_id,
            status_id=status_id,
            **_changes(json_body()),
        )
        return ok(permission.to_dict())

    @app.route(f"{base}/<int:role_id>/<int:status_id>", methods=["DELETE"], endpoint="delete_attendance_permission")
    @login_required
    def delete_permission(role_id: int, status_id: int):
        actor_role_id, _ = current_actor()
        container.permission_admin_service.delete(actor_role_id=actor_role_id, role_id=role_id, status_id=status_id)
        return ok(None, message="Permission deleted")

    @app.route(f"{base}/bulk", methods=["POST"], endpoint="bulk_create_permissions")
    @login_required
    def bulk_create():
        role_id, _ = current_actor()
        items = json_body().get("permissions")
        if not isinstance(items, list) or not items:
            raise ValidationError("permissions must be a non-empty list", rule="permissions")
        permissions, rejected = _parse_items(items, _parse_permission)
        result = container.permission_admin_service.bulk_create(
            actor_role_id=role_id,
            permissions=permissions,
        )
        result.extend(rejected)
        return ok(result.to_dict(), status=201)

    @app.route(f"{base}/roles/<int:role_id>/batch", methods=["PATCH"], endpoint="batch_update_permissions")
    @login_required
    def batch_update(role_id: int):
        actor_role_id, _ = current_actor()
        items = json_body().get("permissions")
        if not isinstance(items, list) or not items:
            raise ValidationError("permissions must be a non-empty list", rule="permissions")
        updates, rejected = _parse_items(items, _parse_update)
        result = container.permission_admin_service.batch_update(
            actor_role_id=actor_role_id,
            role_id=role_id,
            updates=dict(updates),
        )
        result.extend(rejected)
        return ok(result.to_dict())

    @app.route(f"{base}/by-status/<int:status_id>", methods=["GET"], endpoint="permissions_by_status")
    @login_required
    def by_status(status_id: int):
        entries = container.permission_matrix.list_for_status(status_id)
        data = [{"role": e.role.to_dict(), "permission": e.permission.to_dict()} for e in entries]
        return ok(data, count=len(data))

    @app.route(f"{base}/by-role/<int:role_id>", methods=["DELETE"], endpoint="delete_role_permissions")
    @login_required
    def delete_for_role(role_id: int):
        actor_role_id, _ = current_actor()
        deleted = container.permission_admin_service.delete_for_role(actor_role_id=actor_role_id, role_id=role_id)
        return ok({"deleted": deleted}, message="Role permissions deleted")

    @app.route(f"{base}/templates/<role_type>", methods=["GET"], endpoint="permission_template")
    @login_required
    def template(role_type: str):
        flags = container.permission_admin_service.template_for(_parse_role_type(role_type))
        data = {key: flags[name] for key, name in PAYLOAD_FIELDS.items() if name in flags}
        return ok(data, roleType=role_type.upper())

    @app.route(f"{base}/roles/<int:role_id>/apply-template", methods=["POST"], endpoint="apply_permission_template")
    @login_required
    def apply_template(role_id: int):
        actor_role_id, _ = current_actor()
        created = container.permission_admin_service.apply_template(actor_role_id=actor_role_id, role_id=role_id)
        return ok([p.to_dict() for p in created], status=201, count=len(created))

    @app.route(f"{base}/dashboard/summary", methods=["GET"], endpoint="permissions_dashboard")
    @login_required
    def dashboard():
        return ok(container.report_service.dashboard_summary())

    @app.route(f"{base}/coverage", methods=["GET"], endpoint="permissions_coverage")
    @login_required
    def coverage():
        c = container.report_service.coverage()
        return ok(
            {
                "totalCells": c.total_cells,
                "configuredCells": c.configured_cells,
                "configurationPercentage": c.percentage,
            }
        )

    @app.route(f"{base}/summary/<int:role_id>", methods=["GET"], endpoint="role_permission_summary")
    @login_required
    def role_summary(role_id: int):
        return ok(container.report_service.role_summary(role_id))
