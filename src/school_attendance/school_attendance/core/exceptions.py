from __future__ import annotations

from typing import Optional

from .enums import ErrorCode


class DomainError(Exception):
    """Base exception for business rule violations.

    `rule` names the permission flag or bound that failed so callers can
    render a precise message.
    """

    error_code: ErrorCode = ErrorCode.VALIDATION_FAILED

    def __init__(self, message: str, *, rule: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.rule = rule
        self.detail = detail

    def to_payload(self) -> dict:
        payload = {"errorCode": self.error_code.value, "message": self.message}
        if self.rule:
            payload["rule"] = self.rule
        if self.detail:
            payload["detail"] = self.detail
        return payload


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    error_code = ErrorCode.VALIDATION_FAILED


class AuthorizationError(DomainError):
    """Raised when an actor lacks permission for an action."""

    error_code = ErrorCode.PERMISSION_DENIED


class ForbiddenTransitionError(DomainError):
    """Raised on a justification state-machine violation."""

    error_code = ErrorCode.FORBIDDEN_TRANSITION


class NotFoundError(DomainError):
    error_code = ErrorCode.NOT_FOUND


class ConflictError(DomainError):
    """Raised when the store detects a concurrent modification."""

    error_code = ErrorCode.CONFLICT
