"""Checks an upload must pass before any byte reaches the blob store."""

from dataclasses import dataclass
from typing import Optional

from app.core.config import ALLOWED_CONTENT_TYPES, ALLOWED_EXTENSIONS, MAX_UPLOAD_BYTES
from app.core.errors import BadRequest

INVALID_TYPE_MESSAGE = "Invalid file type. Only PDF, DOC, DOCX, TXT, ZIP, and images are allowed."


@dataclass(frozen=True)
class FileMeta:
    file_name: str
    content_type: Optional[str] = None


def file_extension(file_name: str) -> str:
    lower = (file_name or "").strip().lower()
    return lower.rsplit(".", 1)[-1] if "." in lower else ""


def normalize_content_type(content_type: Optional[str]) -> str:
    # "text/plain; charset=utf-8" -> "text/plain"
    return (content_type or "").split(";", 1)[0].strip().lower()


def is_allowed_type(meta: FileMeta) -> bool:
    """Either an allowed extension or an allowed declared content type is enough."""
    if file_extension(meta.file_name) in ALLOWED_EXTENSIONS:
        return True
    return normalize_content_type(meta.content_type) in ALLOWED_CONTENT_TYPES


def validate_upload(data: Optional[bytes], meta: Optional[FileMeta], *, max_bytes: int = MAX_UPLOAD_BYTES) -> None:
    if data is None or meta is None or not meta.file_name:
        raise BadRequest("No file uploaded")
    if len(data) == 0:
        raise BadRequest("Uploaded file is empty")
    if len(data) > max_bytes:
        raise BadRequest(f"File too large. Max size: {max_bytes // (1024 * 1024)}MB")
    if not is_allowed_type(meta):
        raise BadRequest(INVALID_TYPE_MESSAGE)
