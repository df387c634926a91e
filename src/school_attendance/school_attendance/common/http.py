"""Shared pieces of the JSON controllers."""

from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, request, session

from ..core.enums import ErrorCode
from ..core.exceptions import DomainError, ValidationError

HTTP_STATUS = {
    ErrorCode.PERMISSION_DENIED: 403,
    ErrorCode.FORBIDDEN_TRANSITION: 403,
    ErrorCode.VALIDATION_FAILED: 422,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
}


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session or "role_id" not in session:
            return (
                jsonify(
                    {
                        "success": False,
                        "errorCode": ErrorCode.PERMISSION_DENIED.value,
                        "message": "Authentication required",
                    }
                ),
                401,
            )
        return view(*args, **kwargs)

    return wrapper


def current_actor() -> tuple[int, int]:
    """(role_id, user_id) of the logged-in user."""
    return int(session["role_id"]), int(session["user_id"])


def ok(data=None, status: int = 200, **extra):
    body = {"success": True, "data": data}
    body.update(extra)
    return jsonify(body), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"success": False, **e.to_payload()}), HTTP_STATUS.get(e.error_code, 400)


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def int_field(value, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer", rule=field_name)
