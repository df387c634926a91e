"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

KB = 1024
MB = 1024 * KB

DOCUMENT_MIN_BYTES = 100 * KB
DOCUMENT_MAX_BYTES = 5 * MB

ALLOWED_DOCUMENT_EXTENSIONS = frozenset({"pdf", "jpg", "jpeg", "png", "doc", "docx"})
ALLOWED_DOCUMENT_MIME_TYPES = frozenset(
    {
        "application/pdf",
        "image/jpeg",
        "image/png",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
)

REJECTION_REASON_MIN_LENGTH = 10
REJECTION_REASON_MAX_LENGTH = 500
