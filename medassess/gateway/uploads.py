"""Upload validation and scoped temporary storage."""

from __future__ import annotations

import logging
import os
import re
import tempfile
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator

from fastapi import UploadFile

logger = logging.getLogger(__name__)

ALLOWED_TYPES = re.compile(r"jpeg|jpg|png|gif")
CHUNK_SIZE = 1024 * 1024

MIME_BY_EXTENSION = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
}


class UploadRejected(Exception):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class StoredUpload:
    path: Path
    filename: str
    size: int
    mime_type: str

    def read(self) -> bytes:
        return self.path.read_bytes()


def validate_image(filename: str, content_type: str | None) -> str:
    """Check extension and content type; return the mime hint for the model."""
    ext = Path(filename).suffix.lower()
    if not (ALLOWED_TYPES.search(ext) and ALLOWED_TYPES.search(content_type or "")):
        raise UploadRejected("Only image files are allowed")
    return MIME_BY_EXTENSION.get(ext, "image/jpeg")


@asynccontextmanager
async def stored_upload(
    upload: UploadFile, max_bytes: int, upload_dir: str = "",
) -> AsyncIterator[StoredUpload]:
    """Spool an upload to a temp file that is removed on every exit path."""
    filename = upload.filename or "upload"
    mime_type = validate_image(filename, upload.content_type)

    directory = upload_dir or None
    if directory:
        os.makedirs(directory, exist_ok=True)
    tmp = tempfile.NamedTemporaryFile(
        delete=False, prefix="medassess_", suffix=Path(filename).suffix.lower(), dir=directory,
    )
    path = Path(tmp.name)
    try:
        size = 0
        with tmp:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    raise UploadRejected(f"Image exceeds {max_bytes} bytes", status_code=413)
                tmp.write(chunk)
        yield StoredUpload(path=path, filename=filename, size=size, mime_type=mime_type)
    finally:
        try:
            path.unlink(missing_ok=True)
            logger.debug("Removed temporary upload %s", path)
        except OSError:
            logger.warning("Could not delete temporary upload %s", path, exc_info=True)
