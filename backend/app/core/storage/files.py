import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from fastapi import UploadFile
from starlette.responses import Response
from starlette.staticfiles import StaticFiles

from app.core.utils.keys import generate_upload_filename
from app.core.validations.exceptions import UploadPolicyError

logger = logging.getLogger(__name__)

DOCUMENT_CONTENT_TYPES = {
    "application/pdf": ("pdf",),
    "image/jpeg": ("jpg", "jpeg"),
    "image/png": ("png",),
}


@dataclass
class PendingUpload:
    filename: str
    content: bytes


class LocalFileStorage:
    """
    Stores uploaded documents under ``<root>/<upload_to>``.

    Files are checked as a batch first; nothing touches the disk unless every
    file passes, so a rejected request never leaves files behind.
    """

    def __init__(
        self,
        root: str,
        upload_to: str,
        public_prefix: str = "/uploads",
        max_files: int = 5,
        max_size: int = 5 * 1024 * 1024,
        allowed_types: Optional[dict] = None,
    ):
        self.directory = Path(root) / upload_to
        self.public_prefix = f"{public_prefix.rstrip('/')}/{upload_to.strip('/')}"
        self.max_files = max_files
        self.max_size = max_size
        self.allowed_types = allowed_types or DOCUMENT_CONTENT_TYPES

    def _check_type(self, upload: UploadFile) -> None:
        extensions = self.allowed_types.get(upload.content_type or "")
        ext = (upload.filename or "").rsplit(".", 1)[-1].lower()
        if not extensions or ext not in extensions:
            raise UploadPolicyError("Only PDF, JPG, and PNG files are allowed")

    def _too_large(self) -> UploadPolicyError:
        return UploadPolicyError(
            f"Each file must be {self.max_size // (1024 * 1024)}MB or smaller"
        )

    async def validate(self, uploads: Iterable[UploadFile]) -> List[PendingUpload]:
        uploads = [upload for upload in uploads if upload.filename]
        if len(uploads) > self.max_files:
            raise UploadPolicyError(f"You can upload up to {self.max_files} documents")

        pending = []
        for upload in uploads:
            self._check_type(upload)
            if upload.size is not None and upload.size > self.max_size:
                raise self._too_large()
            content = await upload.read(self.max_size + 1)
            if len(content) > self.max_size:
                raise self._too_large()
            pending.append(PendingUpload(filename=upload.filename, content=content))
        return pending

    def save(self, pending: Iterable[PendingUpload]) -> List[str]:
        """Write validated files and return their public paths."""
        self.directory.mkdir(parents=True, exist_ok=True)
        paths = []
        try:
            for upload in pending:
                name = generate_upload_filename(upload.filename)
                (self.directory / name).write_bytes(upload.content)
                paths.append(f"{self.public_prefix}/{name}")
        except OSError:
            self.delete(paths)
            raise
        return paths

    def delete(self, paths: Iterable[str]) -> None:
        for path in paths:
            file_path = self.directory / os.path.basename(path)
            try:
                file_path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Could not delete {file_path}: {e}")


class CachedStaticFiles(StaticFiles):
    """StaticFiles with a long-lived Cache-Control header."""

    def __init__(self, *args, max_age: int = 60 * 60 * 24 * 365, **kwargs):
        self.max_age = max_age
        super().__init__(*args, **kwargs)

    def file_response(self, *args, **kwargs) -> Response:
        response = super().file_response(*args, **kwargs)
        response.headers["Cache-Control"] = f"public, max-age={self.max_age}"
        return response
