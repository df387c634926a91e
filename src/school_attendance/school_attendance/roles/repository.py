from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Role


class RoleRepository(Protocol):
    def get_by_id(self, role_id: int) -> Optional[Role]:
        raise NotImplementedError

    def list_roles(self, *, active_only: bool = True) -> Sequence[Role]:
        raise NotImplementedError
