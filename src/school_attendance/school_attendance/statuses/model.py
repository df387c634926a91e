from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AttendanceStatus:
    """Attendance status catalogue entry (present, absent, late, ...).

    `code` is unique and must stay stable once historical records use it.
    """

    status_id: int
    code: str
    name: str
    description: Optional[str] = None
    is_negative: bool = False
    requires_justification: bool = False
    is_temporal: bool = False
    is_excused: bool = False
    can_have_notes: bool = True
    color_code: str = "#9CA3AF"
    order: int = 0
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.status_id,
            "code": self.code,
            "name": self.name,
            "description": self.description,
            "isNegative": self.is_negative,
            "requiresJustification": self.requires_justification,
            "isTemporal": self.is_temporal,
            "isExcused": self.is_excused,
            "canHaveNotes": self.can_have_notes,
            "colorCode": self.color_code,
            "order": self.order,
        }
