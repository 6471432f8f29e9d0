import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Tokens are issued by the identity provider; we only verify them.
# DEV ONLY default secret. Set SECRET_KEY in the environment for real deployments.
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = os.getenv("ALGORITHM", "HS256")

DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR}/submissions.db")
UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", str(BASE_DIR / "uploads")))

# Upload policy
MAX_UPLOAD_BYTES_LIMIT = 10 * 1024 * 1024  # hard cap: 10 MiB
UPLOAD_CHUNK_SIZE = 1024 * 1024

ALLOWED_EXTENSIONS = frozenset({"pdf", "doc", "docx", "txt", "zip", "jpg", "jpeg", "png"})

# declared content types that count as an allowed type on their own
ALLOWED_CONTENT_TYPES = {
    "application/pdf": "pdf",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "text/plain": "txt",
    "application/zip": "zip",
    "application/x-zip-compressed": "zip",
    "image/jpeg": "jpeg",
    "image/jpg": "jpg",
    "image/png": "png",
}


def _env_int(name: str, default: int, *, maximum: int | None = None) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if value <= 0:
        return default
    if maximum is not None:
        value = min(value, maximum)
    return value


def _env_flag(name: str, default: bool = False) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


MAX_UPLOAD_BYTES = _env_int("MAX_UPLOAD_BYTES", MAX_UPLOAD_BYTES_LIMIT, maximum=MAX_UPLOAD_BYTES_LIMIT)

# Legacy behaviour lets callers without a role submit. Flip this on to require role == "student".
STRICT_SUBMITTER_ROLE = _env_flag("STRICT_SUBMITTER_ROLE", False)
