from __future__ import annotations

import io
from dataclasses import replace
from datetime import date, datetime

from src.school_attendance.school_attendance.attendance.model import DailyAttendanceRecord
from src.school_attendance.school_attendance.container import wire
from src.school_attendance.school_attendance.core.constants import MB
from src.school_attendance.school_attendance.core.enums import JustificationStatus, RoleType
from src.school_attendance.school_attendance.core.exceptions import NotFoundError
from src.school_attendance.school_attendance.documents.model import StoredDocument, UploadedDocument
from src.school_attendance.school_attendance.justifications.model import Justification
from src.school_attendance.school_attendance.permissions.model import AttendancePermission
from src.school_attendance.school_attendance.roles.model import Role
from src.school_attendance.school_attendance.statuses.model import AttendanceStatus

ADMIN, TEACHER, COORDINATOR, PARENT = 1, 2, 3, 4
PRESENT, ABSENT, JUSTIFIED_ABSENCE, WITHDRAWN = 1, 2, 3, 4


class FakeRolesRepo:
    def __init__(self, roles):
        self._roles = {r.role_id: r for r in roles}

    def get_by_id(self, role_id):
        return self._roles.get(int(role_id))

    def list_roles(self, *, active_only=True):
        return [r for r in self._roles.values() if r.is_active or not active_only]


class FakeStatusesRepo:
    def __init__(self, statuses):
        self._statuses = {s.status_id: s for s in statuses}

    def get_by_id(self, status_id):
        return self._statuses.get(int(status_id))

    def get_by_code(self, code):
        return next((s for s in self._statuses.values() if s.code == code), None)

    def list_statuses(self, *, active_only=True):
        items = [s for s in self._statuses.values() if s.is_active or not active_only]
        return sorted(items, key=lambda s: s.order)


class FakePermissionsRepo:
    def __init__(self, permissions=()):
        self.rows = {p.key: p for p in permissions}
        self.writes = 0

    def get_permission(self, role_id, attendance_status_id):
        return self.rows.get((int(role_id), int(attendance_status_id)))

    def list_permissions(self, *, role_id=None, attendance_status_id=None, can_approve=None):
        return [
            p
            for p in self.rows.values()
            if (role_id is None or p.role_id == role_id)
            and (attendance_status_id is None or p.attendance_status_id == attendance_status_id)
            and (can_approve is None or p.can_approve == can_approve)
        ]

    def upsert_permission(self, permission):
        self.writes += 1
        self.rows[permission.key] = permission

    def delete_permission(self, role_id, attendance_status_id):
        return self.rows.pop((int(role_id), int(attendance_status_id)), None) is not None

    def delete_for_role(self, role_id):
        keys = [k for k in self.rows if k[0] == int(role_id)]
        for key in keys:
            del self.rows[key]
        return len(keys)


class FakeAttendanceRepo:
    def __init__(self, records=()):
        self.records = {r.attendance_id: r for r in records}
        self.writes = 0

    def get_record(self, attendance_id):
        return self.records.get(int(attendance_id))

    def update_record_status(self, *, attendance_id, status_id, notes, justification_id, recorded_by, expected_version):
        current = self.records.get(int(attendance_id))
        if not current or current.version != expected_version:
            return False
        self.writes += 1
        self.records[current.attendance_id] = replace(
            current,
            attendance_status_id=status_id,
            notes=notes,
            justification_id=justification_id,
            recorded_by=recorded_by,
            version=current.version + 1,
        )
        return True

    def link_justification(self, *, attendance_id, justification_id, expected_version):
        current = self.records.get(int(attendance_id))
        if not current or current.version != expected_version:
            return False
        self.writes += 1
        self.records[current.attendance_id] = replace(
            current, justification_id=justification_id, version=current.version + 1
        )
        return True


class FakeJustificationsRepo:
    def __init__(self):
        self._next_id = 1
        self.items: dict[int, Justification] = {}

    def create_justification(self, new):
        jid = self._next_id
        self._next_id += 1
        self.items[jid] = Justification(
            justification_id=jid,
            attendance_record_id=new.attendance_record_id,
            description=new.description,
            status=JustificationStatus.PENDING,
            created_at=datetime(2026, 3, 2, 8, 0, 0),
            submitted_by=new.submitted_by,
            attendance_status_id=new.attendance_status_id,
            document_url=new.document_url,
            document_name=new.document_name,
            document_type=new.document_type,
        )
        return jid

    def get_by_id(self, justification_id):
        return self.items.get(int(justification_id))

    def get_justification(self, attendance_record_id):
        matches = [j for j in self.items.values() if j.attendance_record_id == attendance_record_id]
        return max(matches, key=lambda j: j.justification_id) if matches else None

    def list_justifications(self, *, status=None, attendance_record_id=None, attendance_status_ids=None, limit=200):
        items = [
            j
            for j in self.items.values()
            if (status is None or j.status == status)
            and (attendance_record_id is None or j.attendance_record_id == attendance_record_id)
            and (attendance_status_ids is None or j.attendance_status_id in attendance_status_ids)
        ]
        return items[:limit]

    def count_by_status(self, *, attendance_record_ids=None):
        counts = {}
        for j in self.items.values():
            if attendance_record_ids is None or j.attendance_record_id in attendance_record_ids:
                counts[j.status] = counts.get(j.status, 0) + 1
        return counts

    def approve(self, *, justification_id, approved_by, approved_at):
        j = self.items.get(int(justification_id))
        if not j or j.status != JustificationStatus.PENDING:
            return False
        self.items[j.justification_id] = replace(
            j, status=JustificationStatus.APPROVED, approved_by=approved_by, approved_at=approved_at
        )
        return True

    def reject(self, *, justification_id, rejected_by, reason):
        j = self.items.get(int(justification_id))
        if not j or j.status != JustificationStatus.PENDING:
            return False
        self.items[j.justification_id] = replace(
            j, status=JustificationStatus.REJECTED, rejected_by=rejected_by, rejection_reason=reason
        )
        return True


class FakeDocumentStorage:
    def __init__(self):
        self.stored = []
        self.urls = set()

    def store(self, document):
        self.stored.append(document)
        url = f"/uploads/justifications/{len(self.stored)}_{document.filename}"
        self.urls.add(url)
        return StoredDocument(
            url=url,
            name=document.filename,
            type=document.content_type or "application/octet-stream",
        )

    def open(self, url):
        if url not in self.urls:
            raise NotFoundError("Document not found", detail=url)
        return io.BytesIO(b"%PDF")


def make_document(filename="note.pdf", size=1 * MB, content_type="application/pdf"):
    return UploadedDocument(filename=filename, content_type=content_type, size=size, stream=io.BytesIO(b"%PDF"))


def make_record(attendance_id=100, status_id=None, version=0):
    return DailyAttendanceRecord(
        attendance_id=attendance_id,
        student_id=5001,
        work_date=date(2026, 3, 2),
        attendance_status_id=status_id,
        version=version,
    )


def default_roles():
    return [
        Role(ADMIN, "Administrator", RoleType.ADMIN),
        Role(TEACHER, "Homeroom teacher", RoleType.TEACHER),
        Role(COORDINATOR, "Coordinator", RoleType.COORDINATOR),
        Role(PARENT, "Guardian", RoleType.PARENT),
    ]


def default_statuses():
    return [
        AttendanceStatus(PRESENT, "A", "Present", order=1),
        AttendanceStatus(ABSENT, "I", "Absent", is_negative=True, order=2),
        AttendanceStatus(
            JUSTIFIED_ABSENCE,
            "IJ",
            "Justified absence",
            is_negative=True,
            requires_justification=True,
            is_excused=True,
            order=3,
        ),
        AttendanceStatus(WITHDRAWN, "R", "Withdrawn", can_have_notes=False, order=4),
    ]


def default_permissions():
    return [
        AttendancePermission(TEACHER, PRESENT, can_view=True, can_create=True, can_modify=True),
        AttendancePermission(TEACHER, ABSENT, can_view=True, can_create=True, can_modify=True),
        AttendancePermission(
            TEACHER,
            JUSTIFIED_ABSENCE,
            can_view=True,
            can_create=True,
            can_modify=True,
            can_add_justification=True,
            justification_required=True,
            requires_notes=True,
            min_notes_length=10,
            max_notes_length=500,
        ),
        AttendancePermission(TEACHER, WITHDRAWN, can_view=True, can_create=True, can_modify=True),
        AttendancePermission(
            COORDINATOR,
            JUSTIFIED_ABSENCE,
            can_view=True,
            can_modify=True,
            can_approve=True,
            can_add_justification=True,
            justification_required=True,
        ),
        AttendancePermission(PARENT, PRESENT, can_view=True),
        AttendancePermission(PARENT, ABSENT, can_view=False, can_add_justification=True),
    ]


class World:
    """Fake stores plus a wired container over them."""

    def __init__(self, *, records=(), permissions=None, defer_justification=True):
        self.roles = FakeRolesRepo(default_roles())
        self.statuses = FakeStatusesRepo(default_statuses())
        self.permissions = FakePermissionsRepo(default_permissions() if permissions is None else permissions)
        self.attendance = FakeAttendanceRepo(records)
        self.justifications = FakeJustificationsRepo()
        self.documents = FakeDocumentStorage()
        self.container = wire(
            roles_repo=self.roles,
            statuses_repo=self.statuses,
            permissions_repo=self.permissions,
            attendance_repo=self.attendance,
            justifications_repo=self.justifications,
            documents=self.documents,
            defer_justification=defer_justification,
        )

