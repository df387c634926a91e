from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Optional

from ..roles.model import Role
from ..statuses.model import AttendanceStatus

CAPABILITY_FLAGS = (
    "can_view",
    "can_create",
    "can_modify",
    "can_delete",
    "can_approve",
    "can_add_justification",
    "justification_required",
    "requires_notes",
)


@dataclass(frozen=True)
class AttendancePermission:
    """One cell of the role x attendance-status matrix.

    Flags are authoritative as stored: no flag implies another.
    """

    role_id: int
    attendance_status_id: int
    can_view: bool = False
    can_create: bool = False
    can_modify: bool = False
    can_delete: bool = False
    can_approve: bool = False
    can_add_justification: bool = False
    justification_required: bool = False
    requires_notes: bool = False
    min_notes_length: Optional[int] = None
    max_notes_length: Optional[int] = None
    notes: Optional[str] = None

    @property
    def key(self) -> tuple[int, int]:
        return (self.role_id, self.attendance_status_id)

    def with_changes(self, **changes) -> "AttendancePermission":
        known = {f.name for f in fields(self)} - {"role_id", "attendance_status_id"}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown permission fields: {sorted(unknown)}")
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "roleId": self.role_id,
            "attendanceStatusId": self.attendance_status_id,
            "canView": self.can_view,
            "canCreate": self.can_create,
            "canModify": self.can_modify,
            "canDelete": self.can_delete,
            "canApprove": self.can_approve,
            "canAddJustification": self.can_add_justification,
            "justificationRequired": self.justification_required,
            "requiresNotes": self.requires_notes,
            "minNotesLength": self.min_notes_length,
            "maxNotesLength": self.max_notes_length,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class MatrixCoverage:
    total_cells: int
    configured_cells: int

    @property
    def percentage(self) -> float:
        if self.total_cells == 0:
            return 0.0
        return round(self.configured_cells * 100.0 / self.total_cells, 2)


@dataclass(frozen=True)
class StatusPermission:
    """A status together with the permission a role holds on it."""

    status: AttendanceStatus
    permission: AttendancePermission


@dataclass(frozen=True)
class RolePermission:
    role: Role
    permission: AttendancePermission


@dataclass(frozen=True)
class MatrixRow:
    role: Role
    cells: tuple[Optional[AttendancePermission], ...]


# camelCase API names -> dataclass fields
PAYLOAD_FIELDS = {
    "canView": "can_view",
    "canCreate": "can_create",
    "canModify": "can_modify",
    "canDelete": "can_delete",
    "canApprove": "can_approve",
    "canAddJustification": "can_add_justification",
    "justificationRequired": "justification_required",
    "requiresNotes": "requires_notes",
    "minNotesLength": "min_notes_length",
    "maxNotesLength": "max_notes_length",
    "notes": "notes",
}


def changes_from_payload(data: dict) -> dict:
    changes = {}
    for key, field_name in PAYLOAD_FIELDS.items():
        if key not in data:
            continue
        value = data[key]
        if field_name in CAPABILITY_FLAGS:
            value = bool(value)
        elif field_name.endswith("_length"):
            value = None if value in (None, "") else int(value)
        changes[field_name] = value
    return changes
