from __future__ import annotations

from flask import Flask, request, send_file

from ..common.http import current_actor, int_field, json_body, login_required, ok
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/justifications/pending", methods=["GET"], endpoint="pending_justifications")
    @login_required
    def pending():
        role_id, _ = current_actor()
        items = container.justification_workflow.pending_for_reviewer(actor_role_id=role_id)
        return ok([j.to_dict() for j in items], count=len(items))

    @app.route("/api/justifications/<int:justification_id>", methods=["GET"], endpoint="get_justification")
    @login_required
    def get_justification(justification_id: int):
        role_id, _ = current_actor()
        j = container.justification_workflow.view(actor_role_id=role_id, justification_id=justification_id)
        return ok(j.to_dict())

    @app.route("/api/justifications/<int:justification_id>/document", methods=["GET"], endpoint="justification_document")
    @login_required
    def document(justification_id: int):
        role_id, _ = current_actor()
        j, stream = container.justification_workflow.open_document(
            actor_role_id=role_id,
            justification_id=justification_id,
        )
        return send_file(
            stream,
            mimetype=j.document_type or "application/octet-stream",
            as_attachment=True,
            download_name=j.document_name or "document",
        )

    @app.route("/api/justifications/<int:justification_id>/approve", methods=["POST"], endpoint="approve_justification")
    @login_required
    def approve(justification_id: int):
        role_id, user_id = current_actor()
        j = container.justification_workflow.approve(
            actor_role_id=role_id,
            justification_id=justification_id,
            approved_by=user_id,
        )
        return ok(j.to_dict())

    @app.route("/api/justifications/<int:justification_id>/reject", methods=["POST"], endpoint="reject_justification")
    @login_required
    def reject(justification_id: int):
        role_id, user_id = current_actor()
        j = container.justification_workflow.reject(
            actor_role_id=role_id,
            justification_id=justification_id,
            rejected_by=user_id,
            reason=json_body().get("reason") or request.form.get("reason", ""),
        )
        return ok(j.to_dict())

    @app.route("/api/justifications/bulk-approve", methods=["POST"], endpoint="bulk_approve_justifications")
    @login_required
    def bulk_approve():
        role_id, user_id = current_actor()
        ids = json_body().get("justificationIds")
        if not isinstance(ids, list) or not ids:
            raise ValidationError("justificationIds must be a non-empty list", rule="justificationIds")
        result = container.justification_workflow.approve_many(
            actor_role_id=role_id,
            justification_ids=[int_field(i, "justificationIds") for i in ids],
            approved_by=user_id,
        )
        return ok(result.to_dict())

    @app.route("/api/justifications/stats", methods=["GET"], endpoint="justification_stats")
    @login_required
    def stats():
        record_ids = request.args.getlist("attendanceRecordId")
        return ok(
            container.report_service.justification_stats(
                [int_field(r, "attendanceRecordId") for r in record_ids] if record_ids else None
            )
        )
