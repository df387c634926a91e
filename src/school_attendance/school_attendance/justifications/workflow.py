from __future__ import annotations

import logging
from types import MappingProxyType
from typing import BinaryIO, Callable, Iterable, Optional

from ..attendance.model import DailyAttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..common.results import BulkOperationResult
from ..common.validators import validate_document, validate_notes
from ..core.constants import REJECTION_REASON_MAX_LENGTH, REJECTION_REASON_MIN_LENGTH
from ..core.enums import JustificationStatus
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    ForbiddenTransitionError,
    NotFoundError,
    ValidationError,
)
from ..documents.model import StoredDocument, UploadedDocument
from ..documents.storage import DocumentStorage
from ..permissions.matrix import PermissionMatrix
from ..statuses.repository import StatusRepository
from .model import Justification, NewJustification
from .repository import JustificationRepository

logger = logging.getLogger(__name__)

TRANSITIONS = MappingProxyType(
    {
        JustificationStatus.PENDING: frozenset({JustificationStatus.APPROVED, JustificationStatus.REJECTED}),
        JustificationStatus.APPROVED: frozenset(),
        JustificationStatus.REJECTED: frozenset(),
    }
)


def ensure_transition(current: JustificationStatus, target: JustificationStatus) -> None:
    if target not in TRANSITIONS.get(current, frozenset()):
        raise ForbiddenTransitionError(
            f"Cannot move justification from {current.value} to {target.value}",
            rule="status",
            detail=f"{current.value} -> {target.value}",
        )


class JustificationWorkflow:
    """Lifecycle of justifications: pending -> approved | rejected."""

    def __init__(
        self,
        justifications: JustificationRepository,
        attendance: AttendanceRepository,
        statuses: StatusRepository,
        matrix: PermissionMatrix,
        documents: DocumentStorage,
        *,
        clock: Callable = now_local,
    ):
        self._justifications = justifications
        self._attendance = attendance
        self._statuses = statuses
        self._matrix = matrix
        self._documents = documents
        self._clock = clock

    def _get_record(self, attendance_id: int) -> DailyAttendanceRecord:
        record = self._attendance.get_record(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found", detail=f"attendance_id={attendance_id}")
        return record

    def get(self, justification_id: int) -> Justification:
        j = self._justifications.get_by_id(int(justification_id))
        if not j:
            raise NotFoundError("Justification not found", detail=f"justification_id={justification_id}")
        return j

    def ensure_can_file(self, record: DailyAttendanceRecord) -> None:
        """A record carries one live justification; a new one may only follow a rejection."""
        latest = self._justifications.get_justification(record.attendance_id)
        if latest and latest.status != JustificationStatus.REJECTED:
            raise ForbiddenTransitionError(
                f"A {latest.status.value} justification already exists for this record",
                rule="status",
                detail=f"justification_id={latest.justification_id}",
            )

    def create_pending(
        self,
        *,
        record: DailyAttendanceRecord,
        status_id: int,
        description: str,
        document: Optional[StoredDocument] = None,
        submitted_by: Optional[int] = None,
    ) -> Justification:
        """Insert a pending justification; callers have already checked permissions."""
        justification_id = self._justifications.create_justification(
            NewJustification(
                attendance_record_id=record.attendance_id,
                attendance_status_id=int(status_id),
                description=description,
                submitted_by=submitted_by,
                document_url=document.url if document else None,
                document_name=document.name if document else None,
                document_type=document.type if document else None,
            )
        )
        logger.info("Justification %s created for attendance %s", justification_id, record.attendance_id)
        return self.get(justification_id)

    def submit(
        self,
        *,
        actor_role_id: int,
        attendance_id: int,
        description: str,
        document: Optional[UploadedDocument] = None,
        submitted_by: Optional[int] = None,
    ) -> Justification:
        """Justify a record after the fact, or resubmit after a rejection."""
        record = self._get_record(attendance_id)
        if record.attendance_status_id is None:
            raise ValidationError("Attendance has not been taken for this record", rule="attendanceStatusId")

        status = self._statuses.get_by_id(record.attendance_status_id)
        permission = self._matrix.resolve(actor_role_id, record.attendance_status_id)
        if not permission or not permission.can_add_justification:
            raise AuthorizationError("Role cannot add justifications for this status", rule="canAddJustification")
        if not (permission.justification_required or (status and status.requires_justification)):
            raise ValidationError("This status does not take a justification", rule="justificationRequired")

        self.ensure_can_file(record)

        description = validate_notes(
            description,
            permission.min_notes_length,
            permission.max_notes_length,
            required=True,
        )
        stored = self._documents.store(validate_document(document))

        justification = self.create_pending(
            record=record,
            status_id=record.attendance_status_id,
            description=description,
            document=stored,
            submitted_by=submitted_by,
        )
        if not self._attendance.link_justification(
            attendance_id=record.attendance_id,
            justification_id=justification.justification_id,
            expected_version=record.version,
        ):
            raise ConflictError("Attendance record was modified concurrently", detail=f"attendance_id={attendance_id}")
        return justification

    def _filed_status_id(self, justification: Justification) -> Optional[int]:
        if justification.attendance_status_id is not None:
            return justification.attendance_status_id
        # rows written before the filed status was stored
        return self._get_record(justification.attendance_record_id).attendance_status_id

    def _require_reviewer(self, actor_role_id: int, justification: Justification) -> None:
        status_id = self._filed_status_id(justification)
        permission = self._matrix.resolve(actor_role_id, status_id) if status_id is not None else None
        if not permission or not permission.can_approve:
            raise ForbiddenTransitionError(
                "Role cannot review justifications for this status",
                rule="canApprove",
                detail=f"attendance_status_id={status_id}",
            )

    def approve(self, *, actor_role_id: int, justification_id: int, approved_by: int) -> Justification:
        j = self.get(justification_id)
        self._require_reviewer(actor_role_id, j)
        ensure_transition(j.status, JustificationStatus.APPROVED)

        if not self._justifications.approve(
            justification_id=j.justification_id,
            approved_by=int(approved_by),
            approved_at=self._clock(),
        ):
            raise ConflictError("Justification was reviewed concurrently", detail=f"justification_id={justification_id}")

        logger.info("Justification %s approved by %s", justification_id, approved_by)
        return self.get(justification_id)

    def reject(self, *, actor_role_id: int, justification_id: int, rejected_by: int, reason: str) -> Justification:
        j = self.get(justification_id)
        self._require_reviewer(actor_role_id, j)
        ensure_transition(j.status, JustificationStatus.REJECTED)
        try:
            reason = validate_notes(reason, REJECTION_REASON_MIN_LENGTH, REJECTION_REASON_MAX_LENGTH, required=True)
        except ValidationError as e:
            raise ValidationError(f"rejection reason {e.message}", rule="rejectionReason", detail=e.detail)

        if not self._justifications.reject(
            justification_id=j.justification_id,
            rejected_by=int(rejected_by),
            reason=reason,
        ):
            raise ConflictError("Justification was reviewed concurrently", detail=f"justification_id={justification_id}")

        logger.info("Justification %s rejected by %s", justification_id, rejected_by)
        return self.get(justification_id)

    def approve_many(
        self,
        *,
        actor_role_id: int,
        justification_ids: Iterable[int],
        approved_by: int,
    ) -> BulkOperationResult:
        result = BulkOperationResult()
        for justification_id in justification_ids:
            try:
                j = self.approve(actor_role_id=actor_role_id, justification_id=justification_id, approved_by=approved_by)
                result.succeeded.append(j.justification_id)
            except DomainError as e:
                logger.warning("Bulk approval skipped justification %s: %s", justification_id, e.message)
                result.add_failure(int(justification_id), e)
        return result

    def latest_for_record(self, attendance_id: int) -> Optional[Justification]:
        return self._justifications.get_justification(int(attendance_id))

    def pending_for_reviewer(self, *, actor_role_id: int, limit: int = 200) -> list[Justification]:
        """Pending justifications filed for statuses the role may approve."""
        status_ids = [p.attendance_status_id for p in self._matrix.approvable(actor_role_id)]
        return list(
            self._justifications.list_justifications(
                status=JustificationStatus.PENDING,
                attendance_status_ids=status_ids,
                limit=limit,
            )
        )

    def _require_viewer(self, actor_role_id: int, justification: Justification) -> None:
        status_id = self._filed_status_id(justification)
        permission = self._matrix.resolve(actor_role_id, status_id) if status_id is not None else None
        if not permission or not (permission.can_view or permission.can_approve):
            raise AuthorizationError(
                "Role cannot view justifications for this status",
                rule="canView",
                detail=f"attendance_status_id={status_id}",
            )

    def view(self, *, actor_role_id: int, justification_id: int) -> Justification:
        j = self.get(justification_id)
        self._require_viewer(actor_role_id, j)
        return j

    def open_document(self, *, actor_role_id: int, justification_id: int) -> tuple[Justification, BinaryIO]:
        j = self.view(actor_role_id=actor_role_id, justification_id=justification_id)
        if not j.document_url:
            raise NotFoundError("Justification has no document", detail=f"justification_id={justification_id}")
        return j, self._documents.open(j.document_url)
