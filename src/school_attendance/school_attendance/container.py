from __future__ import annotations

from dataclasses import dataclass

from .attendance.guard import AttendanceMutationGuard
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .database.connection import DBConfig, DatabaseConnection
from .documents.storage import DocumentStorage, LocalDocumentStorage
from .justifications.mysql_justification_repository import MySQLJustificationRepository
from .justifications.repository import JustificationRepository
from .justifications.workflow import JustificationWorkflow
from .permissions.matrix import PermissionMatrix
from .permissions.mysql_permission_repository import MySQLPermissionRepository
from .permissions.repository import PermissionRepository
from .permissions.service import PermissionAdminService
from .reporting.service import PermissionReportService
from .roles.mysql_role_repository import MySQLRoleRepository
from .roles.repository import RoleRepository
from .statuses.mysql_status_repository import MySQLStatusRepository
from .statuses.repository import StatusRepository


@dataclass(frozen=True)
class Container:
    roles_repo: RoleRepository
    statuses_repo: StatusRepository
    permissions_repo: PermissionRepository
    attendance_repo: AttendanceRepository
    justifications_repo: JustificationRepository
    documents: DocumentStorage

    permission_matrix: PermissionMatrix
    permission_admin_service: PermissionAdminService
    justification_workflow: JustificationWorkflow
    mutation_guard: AttendanceMutationGuard
    report_service: PermissionReportService


def wire(
    *,
    roles_repo: RoleRepository,
    statuses_repo: StatusRepository,
    permissions_repo: PermissionRepository,
    attendance_repo: AttendanceRepository,
    justifications_repo: JustificationRepository,
    documents: DocumentStorage,
    defer_justification: bool = True,
) -> Container:
    matrix = PermissionMatrix(permissions_repo, roles_repo, statuses_repo)
    workflow = JustificationWorkflow(justifications_repo, attendance_repo, statuses_repo, matrix, documents)

    return Container(
        roles_repo=roles_repo,
        statuses_repo=statuses_repo,
        permissions_repo=permissions_repo,
        attendance_repo=attendance_repo,
        justifications_repo=justifications_repo,
        documents=documents,
        permission_matrix=matrix,
        permission_admin_service=PermissionAdminService(permissions_repo, roles_repo, statuses_repo),
        justification_workflow=workflow,
        mutation_guard=AttendanceMutationGuard(
            attendance_repo,
            statuses_repo,
            matrix,
            workflow,
            documents,
            defer_justification=defer_justification,
        ),
        report_service=PermissionReportService(permissions_repo, roles_repo, statuses_repo, justifications_repo, matrix),
    )


def build_container(
    *,
    db_config: dict,
    upload_folder: str,
    document_base_url: str = "/uploads/justifications",
    defer_justification: bool = True,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        roles_repo=MySQLRoleRepository(conn),
        statuses_repo=MySQLStatusRepository(conn),
        permissions_repo=MySQLPermissionRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        justifications_repo=MySQLJustificationRepository(conn),
        documents=LocalDocumentStorage(upload_folder, base_url=document_base_url),
        defer_justification=defer_justification,
    )
