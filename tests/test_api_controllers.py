from __future__ import annotations

import io

import pytest

from fakes import ABSENT, ADMIN, COORDINATOR, JUSTIFIED_ABSENCE, PARENT, PRESENT, TEACHER, World, make_record

from src.school_attendance.school_attendance.main import create_app


@pytest.fixture
def api(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    w = World(records=[make_record(100), make_record(101, status_id=ABSENT, version=3)])
    app = create_app(container=w.container)
    return app.test_client(), w


def login(client, *, role_id, user_id=7):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role_id"] = role_id


def pdf_upload(size=200 * 1024):
    return (io.BytesIO(b"%PDF" + b"0" * (size - 4)), "medical_note.pdf", "application/pdf")


def test_requests_without_session_are_unauthorized(api):
    client, _ = api
    res = client.get(f"/api/attendance-permissions/{TEACHER}/{PRESENT}")
    assert res.status_code == 401


def test_get_permission_and_default_deny(api):
    client, _ = api
    login(client, role_id=TEACHER)

    res = client.get(f"/api/attendance-permissions/{TEACHER}/{JUSTIFIED_ABSENCE}")
    assert res.status_code == 200
    assert res.get_json()["data"]["minNotesLength"] == 10

    res = client.get(f"/api/attendance-permissions/{ADMIN}/{PRESENT}")
    assert res.status_code == 404
    assert res.get_json()["errorCode"] == "NOT_FOUND"


def test_allowed_statuses_for_current_role(api):
    client, _ = api
    login(client, role_id=PARENT)
    body = client.get("/api/attendance-permissions/allowed-statuses").get_json()
    assert [s["code"] for s in body["data"]] == ["A"]


def test_change_status_with_document(api):
    client, w = api
    login(client, role_id=TEACHER)

    res = client.patch(
        "/api/attendance/100/status",
        data={"statusId": str(JUSTIFIED_ABSENCE), "notes": "Doctor visit today", "file": pdf_upload()},
        content_type="multipart/form-data",
    )

    assert res.status_code == 200
    body = res.get_json()
    assert body["data"]["attendanceStatusId"] == JUSTIFIED_ABSENCE
    assert body["justification"]["status"] == "pending"
    assert body["justification"]["documentName"] == "medical_note.pdf"
    assert w.attendance.get_record(100).recorded_by == 7


def test_change_status_with_short_notes_is_unprocessable(api):
    client, w = api
    login(client, role_id=TEACHER)

    res = client.patch(
        "/api/attendance/100/status",
        data={"statusId": str(JUSTIFIED_ABSENCE), "notes": "short", "file": pdf_upload()},
        content_type="multipart/form-data",
    )

    assert res.status_code == 422
    assert res.get_json()["errorCode"] == "VALIDATION_FAILED"
    assert res.get_json()["message"] == "below minimum length"
    assert res.get_json()["rule"] == "minNotesLength"
    assert w.attendance.writes == 0


def test_change_status_denied(api):
    client, _ = api
    login(client, role_id=PARENT)
    res = client.patch("/api/attendance/101/status", json={"statusId": PRESENT})
    assert res.status_code == 403
    assert res.get_json()["errorCode"] == "PERMISSION_DENIED"
    assert res.get_json()["rule"] == "canModify"


def test_change_status_requires_integer_status(api):
    client, _ = api
    login(client, role_id=TEACHER)
    res = client.patch("/api/attendance/101/status", json={"statusId": "abc"})
    assert res.status_code == 422


def test_review_flow_over_http(api):
    client, _ = api
    login(client, role_id=TEACHER)
    client.patch(
        "/api/attendance/100/status",
        data={"statusId": str(JUSTIFIED_ABSENCE), "notes": "Doctor visit today", "file": pdf_upload()},
        content_type="multipart/form-data",
    )

    res = client.post("/api/justifications/1/approve")
    assert res.status_code == 403
    assert res.get_json()["errorCode"] == "FORBIDDEN_TRANSITION"

    login(client, role_id=COORDINATOR, user_id=9)
    res = client.post("/api/justifications/1/reject", json={"reason": "Scan is unreadable"})
    assert res.status_code == 200
    assert res.get_json()["data"]["status"] == "rejected"

    res = client.post("/api/justifications/bulk-approve", json={"justificationIds": [1]})
    assert res.get_json()["data"]["failed"][0]["errorCode"] == "FORBIDDEN_TRANSITION"

    stats = client.get("/api/justifications/stats").get_json()["data"]
    assert stats["rejected"] == 1


def test_admin_creates_and_deletes_permission(api):
    client, w = api
    login(client, role_id=ADMIN)

    res = client.post(
        "/api/attendance-permissions",
        json={"roleId": ADMIN, "attendanceStatusId": PRESENT, "canView": True, "canCreate": 1},
    )
    assert res.status_code == 201
    assert w.permissions.get_permission(ADMIN, PRESENT).can_create is True

    res = client.post("/api/attendance-permissions", json={"roleId": ADMIN, "attendanceStatusId": PRESENT})
    assert res.status_code == 409

    res = client.delete(f"/api/attendance-permissions/{ADMIN}/{PRESENT}")
    assert res.status_code == 200
    assert w.permissions.get_permission(ADMIN, PRESENT) is None


def test_teacher_cannot_edit_permissions(api):
    client, _ = api
    login(client, role_id=TEACHER)
    res = client.patch(f"/api/attendance-permissions/{TEACHER}/{PRESENT}", json={"canDelete": True})
    assert res.status_code == 403


def test_dashboard_and_template(api):
    client, _ = api
    login(client, role_id=ADMIN)

    body = client.get("/api/attendance-permissions/dashboard/summary").get_json()
    assert body["data"]["summary"]["totalPermissions"] == 7

    body = client.get("/api/attendance-permissions/templates/parent").get_json()
    assert body["data"]["canAddJustification"] is True
    assert client.get("/api/attendance-permissions/templates/janitor").status_code == 404

    res = client.post(f"/api/attendance-permissions/roles/{ADMIN}/apply-template")
    assert res.status_code == 201
    assert res.get_json()["count"] == 4
    assert client.get("/api/attendance-permissions/coverage").get_json()["data"]["configuredCells"] == 11


def _file_justified_absence(client):
    login(client, role_id=TEACHER)
    res = client.patch(
        "/api/attendance/100/status",
        data={"statusId": str(JUSTIFIED_ABSENCE), "notes": "Doctor visit today", "file": pdf_upload()},
        content_type="multipart/form-data",
    )
    return res.get_json()["data"]["justificationId"]


def test_pending_queue_and_single_justification(api):
    client, _ = api
    jid = _file_justified_absence(client)

    login(client, role_id=COORDINATOR, user_id=9)
    body = client.get("/api/justifications/pending").get_json()
    assert body["count"] == 1
    assert body["data"][0]["attendanceStatusId"] == JUSTIFIED_ABSENCE

    res = client.get(f"/api/justifications/{jid}")
    assert res.status_code == 200
    assert res.get_json()["data"]["status"] == "pending"
    assert client.get("/api/justifications/999").status_code == 404

    login(client, role_id=PARENT)
    res = client.get(f"/api/justifications/{jid}")
    assert res.status_code == 403
    assert res.get_json()["rule"] == "canView"


def test_justification_document_download(api):
    client, _ = api
    jid = _file_justified_absence(client)

    login(client, role_id=COORDINATOR, user_id=9)
    res = client.get(f"/api/justifications/{jid}/document")
    assert res.status_code == 200
    assert res.mimetype == "application/pdf"
    assert "medical_note.pdf" in res.headers["Content-Disposition"]
    assert res.data == b"%PDF"

    login(client, role_id=PARENT)
    assert client.get(f"/api/justifications/{jid}/document").status_code == 403


def test_change_status_by_code(api):
    client, w = api
    login(client, role_id=TEACHER)

    res = client.patch("/api/attendance/101/status", json={"statusCode": "a"})
    assert res.status_code == 200
    assert w.attendance.get_record(101).attendance_status_id == PRESENT

    res = client.patch("/api/attendance/101/status", json={"statusCode": "ZZ"})
    assert res.status_code == 404


def test_bulk_create_reports_malformed_items(api):
    client, w = api
    login(client, role_id=ADMIN)

    res = client.post(
        "/api/attendance-permissions/bulk",
        json={
            "permissions": [
                {"roleId": ADMIN, "attendanceStatusId": PRESENT, "canView": True},
                "not-a-permission",
                {"roleId": "abc", "attendanceStatusId": ABSENT},
            ]
        },
    )

    assert res.status_code == 201
    data = res.get_json()["data"]
    assert data["successCount"] == 1
    assert [f["rule"] for f in data["failed"]] == ["permissions", "roleId"]
    assert w.permissions.get_permission(ADMIN, PRESENT) is not None


def test_batch_update_reports_malformed_items(api):
    client, w = api
    login(client, role_id=ADMIN)

    res = client.patch(
        f"/api/attendance-permissions/roles/{TEACHER}/batch",
        json={"permissions": [{"attendanceStatusId": PRESENT, "canDelete": True}, 42, {"canView": False}]},
    )

    assert res.status_code == 200
    data = res.get_json()["data"]
    assert data["successCount"] == 1
    assert [f["item"] for f in data["failed"]] == [42, {"canView": False}]
    assert w.permissions.get_permission(TEACHER, PRESENT).can_delete is True


def test_permissions_by_status_and_clear_role(api):
    client, w = api
    login(client, role_id=ADMIN)

    body = client.get(f"/api/attendance-permissions/by-status/{JUSTIFIED_ABSENCE}").get_json()
    assert [e["role"]["id"] for e in body["data"]] == [TEACHER, COORDINATOR]

    res = client.delete(f"/api/attendance-permissions/by-role/{TEACHER}")
    assert res.status_code == 200
    assert res.get_json()["data"]["deleted"] == 4
    assert w.container.permission_matrix.list_for_role(TEACHER) == []
