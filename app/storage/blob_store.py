"""
Byte storage for uploaded submission files.

Submissions only ever hold an opaque storage key; this module is the one place
that turns a key into bytes on disk. Keep the interface small so tests (and a
future object-store backend) can provide their own implementation.

Key shape:
    {epoch_ms}-{uuid_hex}-{sanitized original name}

The uuid part makes keys unique across concurrent uploads even when two
files with the same name arrive in the same millisecond.
"""
from __future__ import annotations

import logging
import os
import re
import tempfile
import time
import unicodedata
import uuid
from pathlib import Path
from typing import Iterator, Protocol

from app.core.config import UPLOAD_CHUNK_SIZE
from app.core.errors import StorageFailure

logger = logging.getLogger(__name__)

_SEGMENT_RE = re.compile(r"[^A-Za-z0-9._-]+")
_KEY_RE = re.compile(r"^[0-9]+-[0-9a-f]{32}-[A-Za-z0-9._-]+$")


class BlobNotFound(LookupError):
    """Raised when a storage key has no bytes behind it."""


class BlobStore(Protocol):
    def put(self, data: bytes, *, file_name: str) -> str: ...

    def exists(self, key: str) -> bool: ...

    def open_read(self, key: str) -> Iterator[bytes]: ...


def sanitize_file_name(file_name: str | None, *, fallback: str = "upload") -> str:
    base = os.path.basename((file_name or "").replace("\\", "/"))
    normalized = unicodedata.normalize("NFKD", base)
    ascii_value = normalized.encode("ascii", "ignore").decode("ascii")
    sanitized = _SEGMENT_RE.sub("-", ascii_value).strip("-_.")
    return sanitized[:120] or fallback


def make_storage_key(file_name: str | None, *, epoch_ms: int | None = None, uuid_hex: str | None = None) -> str:
    if epoch_ms is None:
        epoch_ms = time.time_ns() // 1_000_000
    hexpart = uuid_hex or uuid.uuid4().hex
    return f"{epoch_ms}-{hexpart}-{sanitize_file_name(file_name)}"


class LocalBlobStore:
    """Stores each blob as one file inside ``root``."""

    def __init__(self, root: Path | str, *, chunk_size: int = UPLOAD_CHUNK_SIZE):
        self.root = Path(root)
        self.chunk_size = chunk_size

    def _path_for(self, key: str) -> Path:
        if not _KEY_RE.match(key or ""):
            raise BlobNotFound(key)
        return self.root / key

    def put(self, data: bytes, *, file_name: str) -> str:
        key = make_storage_key(file_name)
        target = self.root / key

        tmp_name = None
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            # write under a temp name first so a key never points at a partial file
            with tempfile.NamedTemporaryFile(dir=self.root, prefix=".upload-", delete=False) as tmp:
                tmp_name = tmp.name
                tmp.write(data)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, target)
        except OSError as exc:
            logger.error("blob write failed key=%s: %s", key, exc)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageFailure("Failed to store uploaded file") from exc

        logger.info("stored blob key=%s bytes=%d", key, len(data))
        return key

    def exists(self, key: str) -> bool:
        try:
            return self._path_for(key).is_file()
        except BlobNotFound:
            return False

    def open_read(self, key: str) -> Iterator[bytes]:
        path = self._path_for(key)
        try:
            fh = path.open("rb")
        except FileNotFoundError:
            raise BlobNotFound(key)
        except OSError as exc:
            logger.error("blob open failed key=%s: %s", key, exc)
            raise StorageFailure("Failed to read stored file") from exc
        return self._iter_chunks(fh)

    def _iter_chunks(self, fh) -> Iterator[bytes]:
        with fh:
            while True:
                chunk = fh.read(self.chunk_size)
                if not chunk:
                    break
                yield chunk
