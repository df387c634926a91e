"""Ordered rule table evaluated before an attendance status change.

Each rule declares when it applies to the resolved permission and what it
checks. Rules run top to bottom and the first failure stops the pipeline,
so the first rule must reject a missing permission before later rules read
its flags.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from ..common.validators import validate_document, validate_notes
from ..core.exceptions import AuthorizationError, ValidationError
from ..documents.model import UploadedDocument
from ..permissions.model import AttendancePermission
from ..statuses.model import AttendanceStatus
from .model import DailyAttendanceRecord


@dataclass(frozen=True)
class MutationContext:
    record: DailyAttendanceRecord
    status: AttendanceStatus
    permission: Optional[AttendancePermission]
    notes: Optional[str] = None
    document: Optional[UploadedDocument] = None
    defer_justification: bool = True


@dataclass(frozen=True)
class MutationRule:
    name: str
    applies: Callable[[MutationContext], bool]
    check: Callable[[MutationContext], None]


def needs_document(permission: AttendancePermission) -> bool:
    return permission.justification_required and permission.can_add_justification


def awaits_justification(permission: AttendancePermission) -> bool:
    """Status changes now, justification is left to a reviewer."""
    return permission.justification_required and not permission.can_add_justification


def _require_permission(ctx: MutationContext) -> None:
    if ctx.permission is None:
        raise AuthorizationError(
            f"No permission configured for status {ctx.status.code}",
            rule="permission",
            detail="default-deny",
        )


def _require_flag(flag: str, rule: str) -> Callable[[MutationContext], None]:
    def check(ctx: MutationContext) -> None:
        if not getattr(ctx.permission, flag):
            raise AuthorizationError(
                f"Role lacks {rule} for status {ctx.status.code}",
                rule=rule,
            )

    return check


def _check_required_notes(ctx: MutationContext) -> None:
    validate_notes(
        ctx.notes,
        ctx.permission.min_notes_length,
        ctx.permission.max_notes_length,
        required=True,
    )


def _check_notes_length(ctx: MutationContext) -> None:
    validate_notes(ctx.notes, ctx.permission.min_notes_length, ctx.permission.max_notes_length)


def _reject_notes(ctx: MutationContext) -> None:
    raise ValidationError(f"Status {ctx.status.code} does not accept notes", rule="canHaveNotes")


def _check_deferral(ctx: MutationContext) -> None:
    if not ctx.defer_justification:
        raise AuthorizationError(
            f"Status {ctx.status.code} requires a justification this role cannot add",
            rule="canAddJustification",
        )


def _check_document(ctx: MutationContext) -> None:
    validate_document(ctx.document)


MUTATION_RULES: tuple[MutationRule, ...] = (
    MutationRule("permission", applies=lambda ctx: True, check=_require_permission),
    MutationRule("canCreate", applies=lambda ctx: ctx.record.is_new, check=_require_flag("can_create", "canCreate")),
    MutationRule(
        "canModify",
        applies=lambda ctx: not ctx.record.is_new,
        check=_require_flag("can_modify", "canModify"),
    ),
    MutationRule("requiresNotes", applies=lambda ctx: ctx.permission.requires_notes, check=_check_required_notes),
    MutationRule(
        "canHaveNotes",
        applies=lambda ctx: bool((ctx.notes or "").strip()) and not ctx.status.can_have_notes,
        check=_reject_notes,
    ),
    MutationRule(
        "notesLength",
        applies=lambda ctx: bool((ctx.notes or "").strip()) and not ctx.permission.requires_notes,
        check=_check_notes_length,
    ),
    MutationRule(
        "canAddJustification",
        applies=lambda ctx: awaits_justification(ctx.permission),
        check=_check_deferral,
    ),
    MutationRule("document", applies=lambda ctx: needs_document(ctx.permission), check=_check_document),
)


def evaluate(ctx: MutationContext, rules: tuple[MutationRule, ...] = MUTATION_RULES) -> list[str]:
    """Run the rule table; return the names of the rules that applied."""
    applied: list[str] = []
    for rule in rules:
        if rule.applies(ctx):
            rule.check(ctx)
            applied.append(rule.name)
    return applied
