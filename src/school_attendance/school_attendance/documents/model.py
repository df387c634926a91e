from __future__ import annotations

import os
from dataclasses import dataclass
from typing import BinaryIO, Optional


@dataclass(frozen=True)
class UploadedDocument:
    """A justification document as received from the caller."""

    filename: str
    content_type: Optional[str]
    size: int
    stream: Optional[BinaryIO] = None

    @property
    def extension(self) -> str:
        _, ext = os.path.splitext(self.filename or "")
        return ext.lstrip(".").lower()

    @classmethod
    def from_file_storage(cls, file) -> "UploadedDocument":
        """Wrap a werkzeug FileStorage, measuring its size without reading it into memory."""
        stream = file.stream
        stream.seek(0, os.SEEK_END)
        size = stream.tell()
        stream.seek(0)
        return cls(
            filename=file.filename or "",
            content_type=file.mimetype or None,
            size=int(size),
            stream=stream,
        )


@dataclass(frozen=True)
class StoredDocument:
    url: str
    name: str
    type: str
