from __future__ import annotations

from flask import Flask, request

from ..common.http import current_actor, int_field, login_required, ok
from ..container import Container
from ..documents.model import UploadedDocument


def uploaded_document(field_name: str = "file"):
    file = request.files.get(field_name)
    if file is None or not file.filename:
        return None
    return UploadedDocument.from_file_storage(file)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/<int:attendance_id>/status", methods=["PATCH"], endpoint="change_attendance_status")
    @login_required
    def change_status(attendance_id: int):
        role_id, user_id = current_actor()
        form = request.form if request.form else (request.get_json(silent=True) or {})

        guard = container.mutation_guard
        record = guard.load_record(attendance_id)
        if form.get("statusId") in (None, "") and form.get("statusCode"):
            new_status_id = guard.status_by_code(form["statusCode"]).status_id
        else:
            new_status_id = int_field(form.get("statusId"), "statusId")
        updated = guard.apply_status_change(
            actor_role_id=role_id,
            record=record,
            new_status_id=new_status_id,
            notes=form.get("notes"),
            document=uploaded_document(),
            recorded_by=user_id,
        )

        justification = None
        if updated.justification_id is not None:
            latest = container.justification_workflow.latest_for_record(updated.attendance_id)
            justification = latest.to_dict() if latest else None
        return ok(updated.to_dict(), justification=justification)

    @app.route(
        "/api/attendance/<int:attendance_id>/justifications",
        methods=["POST"],
        endpoint="submit_attendance_justification",
    )
    @login_required
    def submit_justification(attendance_id: int):
        role_id, user_id = current_actor()
        justification = container.justification_workflow.submit(
            actor_role_id=role_id,
            attendance_id=attendance_id,
            description=request.form.get("description", ""),
            document=uploaded_document(),
            submitted_by=user_id,
        )
        return ok(justification.to_dict(), status=201)

    @app.route(
        "/api/attendance/<int:attendance_id>/justifications/latest",
        methods=["GET"],
        endpoint="latest_attendance_justification",
    )
    @login_required
    def latest_justification(attendance_id: int):
        container.mutation_guard.load_record(attendance_id)
        latest = container.justification_workflow.latest_for_record(attendance_id)
        return ok(latest.to_dict() if latest else None)
