"""Default capability sets per role family.

Applied by administrators to bootstrap a new role; never consulted when
resolving a permission.
"""

from __future__ import annotations

from types import MappingProxyType

from ..core.enums import RoleType

_ALL = dict(
    can_view=True,
    can_create=True,
    can_modify=True,
    can_delete=True,
    can_approve=True,
    can_add_justification=True,
)

PERMISSION_TEMPLATES = MappingProxyType(
    {
        RoleType.ADMIN: _ALL,
        RoleType.COORDINATOR: dict(_ALL, can_delete=False),
        RoleType.TEACHER: dict(
            can_view=True,
            can_create=True,
            can_modify=True,
            can_delete=False,
            can_approve=False,
            can_add_justification=True,
        ),
        RoleType.STAFF: dict(
            can_view=True,
            can_create=True,
            can_modify=False,
            can_delete=False,
            can_approve=False,
            can_add_justification=False,
        ),
        RoleType.PARENT: dict(
            can_view=True,
            can_create=False,
            can_modify=False,
            can_delete=False,
            can_approve=False,
            can_add_justification=True,
        ),
        RoleType.STUDENT: dict(
            can_view=True,
            can_create=False,
            can_modify=False,
            can_delete=False,
            can_approve=False,
            can_add_justification=False,
        ),
        RoleType.CUSTOM: dict(
            can_view=False,
            can_create=False,
            can_modify=False,
            can_delete=False,
            can_approve=False,
            can_add_justification=False,
        ),
    }
)


def template_for(role_type: RoleType) -> dict:
    return dict(PERMISSION_TEMPLATES[RoleType(role_type)])
