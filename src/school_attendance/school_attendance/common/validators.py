"""Field validation rules for notes and justification documents.

Pure functions: they never touch a store, so forms, API handlers and tests
can call them directly. Each raises ValidationError naming the failing rule
and returns the normalized value otherwise.
"""

from __future__ import annotations

from typing import Optional

from ..core.constants import (
    ALLOWED_DOCUMENT_EXTENSIONS,
    ALLOWED_DOCUMENT_MIME_TYPES,
    DOCUMENT_MAX_BYTES,
    DOCUMENT_MIN_BYTES,
    KB,
    MB,
)
from ..core.exceptions import ValidationError
from ..documents.model import UploadedDocument

GENERIC_CONTENT_TYPE = "application/octet-stream"


def validate_notes(
    text: Optional[str],
    min_length: Optional[int] = None,
    max_length: Optional[int] = None,
    required: bool = False,
) -> str:
    notes = (text or "").strip()

    if required and not notes:
        raise ValidationError("notes required", rule="requiresNotes")
    if min_length is not None and len(notes) < min_length:
        raise ValidationError(
            "below minimum length",
            rule="minNotesLength",
            detail=f"{len(notes)} < {min_length} characters",
        )
    if max_length is not None and len(notes) > max_length:
        raise ValidationError(
            "exceeds maximum length",
            rule="maxNotesLength",
            detail=f"{len(notes)} > {max_length} characters",
        )
    return notes


def validate_document(document: Optional[UploadedDocument]) -> UploadedDocument:
    if document is None or not document.filename:
        raise ValidationError("document required", rule="document")

    if document.size > DOCUMENT_MAX_BYTES:
        raise ValidationError(
            "exceeds maximum size",
            rule="document.maxSize",
            detail=f"{document.size / MB:.2f} MB > {DOCUMENT_MAX_BYTES // MB} MB",
        )
    if document.size < DOCUMENT_MIN_BYTES:
        raise ValidationError(
            "below minimum size",
            rule="document.minSize",
            detail=f"{document.size / KB:.0f} KB < {DOCUMENT_MIN_BYTES // KB} KB",
        )

    if document.extension not in ALLOWED_DOCUMENT_EXTENSIONS:
        raise ValidationError(
            "unsupported document type",
            rule="document.type",
            detail=f"extension '{document.extension or '-'}' not in {sorted(ALLOWED_DOCUMENT_EXTENSIONS)}",
        )
    # Generic or missing content types fall back to the extension check.
    content_type = document.content_type or GENERIC_CONTENT_TYPE
    if content_type != GENERIC_CONTENT_TYPE and content_type not in ALLOWED_DOCUMENT_MIME_TYPES:
        raise ValidationError(
            "unsupported document type",
            rule="document.type",
            detail=f"content type '{document.content_type}' not allowed",
        )
    return document
