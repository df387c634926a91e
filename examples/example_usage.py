"""Example: drive the permission rules through the service layer, without Flask."""

import importlib

from config import get_settings_module

from src.school_attendance.school_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, upload_folder=settings.DOCUMENT_UPLOAD_FOLDER)

    for cell in container.permission_matrix.allowed_statuses(role_id=2):
        print(cell.status.code, cell.permission.to_dict())
    print(container.report_service.dashboard_summary()["summary"])


if __name__ == "__main__":
    main()
