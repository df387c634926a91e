from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import JustificationStatus
from .model import Justification, NewJustification


class JustificationRepository(Protocol):
    def create_justification(self, new: NewJustification) -> int:
        """Insert a pending justification and return its id."""

        raise NotImplementedError

    def get_by_id(self, justification_id: int) -> Optional[Justification]:
        raise NotImplementedError

    def get_justification(self, attendance_record_id: int) -> Optional[Justification]:
        """Latest justification submitted for the record."""

        raise NotImplementedError

    def list_justifications(
        self,
        *,
        status: Optional[JustificationStatus] = None,
        attendance_record_id: Optional[int] = None,
        attendance_status_ids: Optional[Sequence[int]] = None,
        limit: int = 200,
    ) -> Sequence[Justification]:
        """Newest first; `attendance_status_ids` keeps rows filed for those statuses."""

        raise NotImplementedError

    def approve(self, *, justification_id: int, approved_by: int, approved_at: datetime) -> bool:
        """Move a pending justification to approved; False if it was not pending."""

        raise NotImplementedError

    def reject(self, *, justification_id: int, rejected_by: int, reason: str) -> bool:
        raise NotImplementedError

    def count_by_status(
        self,
        *,
        attendance_record_ids: Optional[Sequence[int]] = None,
    ) -> dict[JustificationStatus, int]:
        """Unbounded totals per status, optionally limited to some records."""

        raise NotImplementedError
