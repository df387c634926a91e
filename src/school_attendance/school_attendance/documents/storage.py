from __future__ import annotations

import logging
import os
import shutil
import uuid
from typing import BinaryIO, Protocol

from werkzeug.utils import secure_filename

from ..core.exceptions import NotFoundError
from .model import StoredDocument, UploadedDocument

logger = logging.getLogger(__name__)


class DocumentStorage(Protocol):
    def store(self, document: UploadedDocument) -> StoredDocument:
        """Persist an already validated document."""

        raise NotImplementedError

    def open(self, url: str) -> BinaryIO:
        """Binary stream of a stored document; NotFoundError when it is gone."""

        raise NotImplementedError


class LocalDocumentStorage(DocumentStorage):
    """Stores justification documents under an upload folder on disk."""

    def __init__(self, upload_folder: str, *, base_url: str = "/uploads/justifications"):
        self._upload_folder = upload_folder
        self._base_url = base_url.rstrip("/")

    def store(self, document: UploadedDocument) -> StoredDocument:
        if document.stream is None:
            raise ValueError("Document has no content stream")

        filename = secure_filename(document.filename) or f"document.{document.extension}"
        unique_filename = f"{uuid.uuid4().hex}_{filename}"
        os.makedirs(self._upload_folder, exist_ok=True)
        path = os.path.join(self._upload_folder, unique_filename)

        document.stream.seek(0)
        with open(path, "wb") as out:
            shutil.copyfileobj(document.stream, out)

        logger.info("Stored justification document %s (%d bytes)", unique_filename, document.size)
        return StoredDocument(
            url=f"{self._base_url}/{unique_filename}",
            name=document.filename,
            type=document.content_type or document.extension,
        )

    def open(self, url: str) -> BinaryIO:
        name = url.rsplit("/", 1)[-1]
        path = os.path.join(self._upload_folder, name)
        if not url.startswith(f"{self._base_url}/") or secure_filename(name) != name or not os.path.isfile(path):
            raise NotFoundError("Document not found", detail=url)
        return open(path, "rb")
