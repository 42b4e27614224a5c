"""Local disk storage for uploaded images and documents.

Files land in ``<upload_dir>/<folder>/<uuid><ext>`` and are served by the
static mount at ``UPLOAD_URL_PREFIX``.
"""

import re
from pathlib import Path
from typing import Optional
from uuid import uuid4

from core.config import UPLOAD_DEFAULT_FOLDER, UPLOAD_DIR, UPLOAD_MAX_BYTES, UPLOAD_URL_PREFIX
from core.exceptions import ExternalServiceError, ValidationError
from core.logger import get_logger

logger = get_logger("services.upload_service")

_SAFE_SUFFIX = re.compile(r"\.[a-z0-9]+")
_UNSAFE_FOLDER_CHARS = re.compile(r"[^a-zA-Z0-9_-]+")


def safe_suffix(filename: Optional[str]) -> str:
    """Lower-case extension of `filename`, or ``""`` if it looks odd."""
    suffix = Path(filename or "").suffix.lower()
    if not suffix or len(suffix) > 12 or not _SAFE_SUFFIX.fullmatch(suffix):
        return ""
    return suffix


def safe_folder(folder: Optional[str]) -> str:
    """Reduce `folder` to a single path segment of safe characters."""
    cleaned = _UNSAFE_FOLDER_CHARS.sub("-", (folder or "").strip()).strip("-")
    return cleaned or UPLOAD_DEFAULT_FOLDER


class UploadService:
    """Writes uploads to disk and returns their public URL."""

    def __init__(self, upload_dir: str = UPLOAD_DIR, url_prefix: str = UPLOAD_URL_PREFIX,
                 max_bytes: int = UPLOAD_MAX_BYTES):
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")
        self.max_bytes = max_bytes

    def save(self, filename: Optional[str], data: bytes, folder: Optional[str] = None) -> str:
        """Persist `data` and return the URL it is served from.

        Raises:
            ValidationError: If the file is empty or larger than `max_bytes`.
            ExternalServiceError: If the file cannot be written.
        """
        if not data:
            raise ValidationError("No file uploaded", field="file")
        if len(data) > self.max_bytes:
            raise ValidationError(
                f"File is larger than the {self.max_bytes // (1024 * 1024)} MB limit", field="file"
            )

        folder_name = safe_folder(folder)
        stored_name = f"{uuid4().hex}{safe_suffix(filename)}"
        target_dir = self.upload_dir / folder_name
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            (target_dir / stored_name).write_bytes(data)
        except OSError as exc:
            logger.exception("Could not store upload %s", filename)
            raise ExternalServiceError("storage", str(exc)) from exc

        logger.info("Stored upload %s as %s/%s (%s bytes)", filename, folder_name, stored_name, len(data))
        return f"{self.url_prefix}/{folder_name}/{stored_name}"


# export singleton
upload_service = UploadService()
__all__ = ["UploadService", "upload_service", "safe_folder", "safe_suffix"]
