from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import JustificationStatus


@dataclass(frozen=True)
class Justification:
    """Evidence attached to an attendance record, reviewed by an approver.

    Terminal instances (approved/rejected) are never reopened; resubmitting
    creates a new row so the rejection stays in the history.
    `attendance_status_id` is the status the justification was filed for and
    decides who may review it, even after the record moves to another status.
    """

    justification_id: int
    attendance_record_id: int
    description: str
    status: JustificationStatus
    created_at: datetime
    submitted_by: Optional[int] = None
    attendance_status_id: Optional[int] = None
    document_url: Optional[str] = None
    document_name: Optional[str] = None
    document_type: Optional[str] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejected_by: Optional[int] = None
    rejection_reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.justification_id,
            "attendanceRecordId": self.attendance_record_id,
            "description": self.description,
            "status": self.status.value,
            "createdAt": self.created_at.strftime("%Y-%m-%d %H:%M"),
            "submittedBy": self.submitted_by,
            "attendanceStatusId": self.attendance_status_id,
            "documentUrl": self.document_url,
            "documentName": self.document_name,
            "documentType": self.document_type,
            "approvedBy": self.approved_by,
            "approvedAt": self.approved_at.strftime("%Y-%m-%d %H:%M") if self.approved_at else None,
            "rejectedBy": self.rejected_by,
            "rejectionReason": self.rejection_reason,
        }


@dataclass(frozen=True)
class NewJustification:
    attendance_record_id: int
    description: str
    submitted_by: Optional[int] = None
    attendance_status_id: Optional[int] = None
    document_url: Optional[str] = None
    document_name: Optional[str] = None
    document_type: Optional[str] = None
