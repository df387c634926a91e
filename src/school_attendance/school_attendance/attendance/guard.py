from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from ..core.exceptions import ConflictError, DomainError, NotFoundError
from ..documents.model import UploadedDocument
from ..documents.storage import DocumentStorage
from ..justifications.workflow import JustificationWorkflow
from ..permissions.matrix import PermissionMatrix
from ..statuses.model import AttendanceStatus
from ..statuses.repository import StatusRepository
from .model import DailyAttendanceRecord
from .repository import AttendanceRepository
from .rules import MutationContext, evaluate, needs_document

logger = logging.getLogger(__name__)


class AttendanceMutationGuard:
    """Use case: change the status of a daily attendance record.

    Every rule is checked before anything is written: a rejected request
    leaves the record, its justification and document storage untouched.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        statuses: StatusRepository,
        matrix: PermissionMatrix,
        workflow: JustificationWorkflow,
        documents: DocumentStorage,
        *,
        defer_justification: bool = True,
    ):
        self._attendance = attendance
        self._statuses = statuses
        self._matrix = matrix
        self._workflow = workflow
        self._documents = documents
        self._defer_justification = bool(defer_justification)

    def load_record(self, attendance_id: int) -> DailyAttendanceRecord:
        record = self._attendance.get_record(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found", detail=f"attendance_id={attendance_id}")
        return record

    def _get_status(self, status_id: int) -> AttendanceStatus:
        status = self._statuses.get_by_id(int(status_id))
        if not status or not status.is_active:
            raise NotFoundError("Attendance status not found", detail=f"attendance_status_id={status_id}")
        return status

    def status_by_code(self, code: str) -> AttendanceStatus:
        status = self._statuses.get_by_code(str(code).strip().upper())
        if not status or not status.is_active:
            raise NotFoundError("Attendance status not found", detail=f"code={code}")
        return status

    def apply_status_change(
        self,
        *,
        actor_role_id: int,
        record: DailyAttendanceRecord,
        new_status_id: int,
        notes: Optional[str] = None,
        document: Optional[UploadedDocument] = None,
        recorded_by: Optional[int] = None,
    ) -> DailyAttendanceRecord:
        status = self._get_status(new_status_id)
        permission = self._matrix.resolve(actor_role_id, status.status_id)

        ctx = MutationContext(
            record=record,
            status=status,
            permission=permission,
            notes=notes,
            document=document,
            defer_justification=self._defer_justification,
        )
        filing = permission is not None and needs_document(permission)
        try:
            evaluate(ctx)
            if filing:
                self._workflow.ensure_can_file(record)
        except DomainError as e:
            logger.warning(
                "Status change denied attendance=%s role=%s status=%s rule=%s: %s",
                record.attendance_id,
                actor_role_id,
                status.code,
                e.rule,
                e.message,
            )
            raise

        clean_notes = (notes or "").strip() or None
        # leaving a status that takes a justification drops the link
        justification_id = record.justification_id if permission.justification_required else None
        if filing:
            stored = self._documents.store(document)
            justification = self._workflow.create_pending(
                record=record,
                status_id=status.status_id,
                description=clean_notes or "",
                document=stored,
                submitted_by=recorded_by,
            )
            justification_id = justification.justification_id

        recorder = recorded_by if recorded_by is not None else record.recorded_by
        if not self._attendance.update_record_status(
            attendance_id=record.attendance_id,
            status_id=status.status_id,
            notes=clean_notes,
            justification_id=justification_id,
            recorded_by=recorder,
            expected_version=record.version,
        ):
            raise ConflictError(
                "Attendance record was modified concurrently",
                detail=f"attendance_id={record.attendance_id}, version={record.version}",
            )

        logger.info(
            "Attendance %s set to %s by role=%s (justification=%s)",
            record.attendance_id,
            status.code,
            actor_role_id,
            justification_id,
        )
        return replace(
            record,
            attendance_status_id=status.status_id,
            notes=clean_notes,
            justification_id=justification_id,
            recorded_by=recorder,
            version=record.version + 1,
        )
