from __future__ import annotations

from dataclasses import replace

from fakes import ABSENT, ADMIN, COORDINATOR, JUSTIFIED_ABSENCE, PARENT, PRESENT, TEACHER, WITHDRAWN, World

from src.school_attendance.school_attendance.core.enums import RoleType
from src.school_attendance.school_attendance.permissions.model import AttendancePermission


def test_unconfigured_pair_resolves_to_none():
    matrix = World().container.permission_matrix
    assert matrix.resolve(ADMIN, PRESENT) is None
    assert matrix.resolve(999, PRESENT) is None


def test_resolve_is_idempotent():
    matrix = World().container.permission_matrix
    assert matrix.resolve(TEACHER, JUSTIFIED_ABSENCE) == matrix.resolve(TEACHER, JUSTIFIED_ABSENCE)


def test_resolve_sees_updates_immediately():
    w = World()
    w.permissions.upsert_permission(AttendancePermission(ADMIN, PRESENT, can_view=True))
    assert w.container.permission_matrix.resolve(ADMIN, PRESENT).can_view is True


def test_list_for_role_returns_configured_statuses_in_display_order():
    cells = World().container.permission_matrix.list_for_role(TEACHER)
    assert [c.status.status_id for c in cells] == [PRESENT, ABSENT, JUSTIFIED_ABSENCE, WITHDRAWN]


def test_list_for_role_skips_inactive_statuses():
    w = World()
    w.statuses._statuses[WITHDRAWN] = replace(w.statuses.get_by_id(WITHDRAWN), is_active=False)
    cells = w.container.permission_matrix.list_for_role(TEACHER)
    assert WITHDRAWN not in [c.status.status_id for c in cells]


def test_allowed_statuses_only_include_viewable():
    cells = World().container.permission_matrix.allowed_statuses(PARENT)
    assert [c.status.code for c in cells] == ["A"]


def test_coverage_counts_active_pairs():
    coverage = World().container.permission_matrix.coverage()
    assert coverage.total_cells == 16
    assert coverage.configured_cells == 7
    assert coverage.percentage == 43.75


def test_coverage_of_empty_matrix():
    coverage = World(permissions=[]).container.permission_matrix.coverage()
    assert coverage.configured_cells == 0
    assert coverage.percentage == 0.0


def test_grid_has_none_for_missing_cells():
    statuses, rows = World().container.permission_matrix.grid(role_type=RoleType.COORDINATOR)
    assert len(rows) == 1 and rows[0].role.role_id == COORDINATOR
    by_status = dict(zip([s.status_id for s in statuses], rows[0].cells))
    assert by_status[PRESENT] is None
    assert by_status[JUSTIFIED_ABSENCE].can_approve is True


def test_list_for_status_returns_roles_with_a_row():
    entries = World().container.permission_matrix.list_for_status(JUSTIFIED_ABSENCE)
    assert [e.role.role_id for e in entries] == [TEACHER, COORDINATOR]
    assert entries[1].permission.can_approve is True


def test_list_for_status_skips_inactive_roles():
    w = World()
    w.roles._roles[COORDINATOR] = replace(w.roles.get_by_id(COORDINATOR), is_active=False)
    assert [e.role.role_id for e in w.container.permission_matrix.list_for_status(JUSTIFIED_ABSENCE)] == [TEACHER]


def test_approvable_lists_statuses_with_can_approve():
    matrix = World().container.permission_matrix
    assert [p.attendance_status_id for p in matrix.approvable(COORDINATOR)] == [JUSTIFIED_ABSENCE]
    assert matrix.approvable(TEACHER) == []
