from __future__ import annotations

from enum import Enum


class RoleType(str, Enum):
    """Role families used to pick permission templates."""

    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    COORDINATOR = "COORDINATOR"
    PARENT = "PARENT"
    STUDENT = "STUDENT"
    STAFF = "STAFF"
    CUSTOM = "CUSTOM"


class JustificationStatus(str, Enum):
    """Justification review lifecycle."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ErrorCode(str, Enum):
    PERMISSION_DENIED = "PERMISSION_DENIED"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    FORBIDDEN_TRANSITION = "FORBIDDEN_TRANSITION"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
