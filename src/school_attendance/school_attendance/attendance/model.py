from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class DailyAttendanceRecord:
    """Domain entity: one student's attendance for one day.

    `attendance_status_id` is None until attendance is first taken; `version`
    is bumped by every status update and guards against lost updates.
    """

    attendance_id: int
    student_id: int
    work_date: date
    attendance_status_id: Optional[int]
    recorded_by: Optional[int] = None
    notes: Optional[str] = None
    justification_id: Optional[int] = None
    version: int = 0

    @property
    def is_new(self) -> bool:
        return self.attendance_status_id is None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "studentId": self.student_id,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "attendanceStatusId": self.attendance_status_id,
            "recordedBy": self.recorded_by,
            "notes": self.notes,
            "justificationId": self.justification_id,
            "version": self.version,
        }
