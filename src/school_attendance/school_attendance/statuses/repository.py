from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceStatus


class StatusRepository(Protocol):
    def get_by_id(self, status_id: int) -> Optional[AttendanceStatus]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[AttendanceStatus]:
        raise NotImplementedError

    def list_statuses(self, *, active_only: bool = True) -> Sequence[AttendanceStatus]:
        """Return statuses ordered by display order."""

        raise NotImplementedError
