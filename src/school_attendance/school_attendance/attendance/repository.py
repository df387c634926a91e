from __future__ import annotations

from typing import Optional, Protocol

from .model import DailyAttendanceRecord


class AttendanceRepository(Protocol):
    def get_record(self, attendance_id: int) -> Optional[DailyAttendanceRecord]:
        raise NotImplementedError

    def update_record_status(
        self,
        *,
        attendance_id: int,
        status_id: int,
        notes: Optional[str],
        justification_id: Optional[int],
        recorded_by: Optional[int],
        expected_version: int,
    ) -> bool:
        """Write the new status only if the row is still at `expected_version`.

        Returns False when another request changed the record first.
        """

        raise NotImplementedError

    def link_justification(self, *, attendance_id: int, justification_id: int, expected_version: int) -> bool:
        raise NotImplementedError
