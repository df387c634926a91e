from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import RoleType


@dataclass(frozen=True)
class Role:
    """Reference entity managed by the user administration module."""

    role_id: int
    name: str
    role_type: RoleType
    is_active: bool = True

    def to_dict(self) -> dict:
        return {"id": self.role_id, "name": self.name, "roleType": self.role_type.value}
