from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import jwt
from jose.exceptions import JOSEError

from app.core.config import ALGORITHM, SECRET_KEY
from app.schemas.identity import Caller

# claim names the identity provider has used for the subject over time
SUBJECT_CLAIMS = ("sub", "id", "user_id", "uid")


class TokenError(Exception):
    """Raised when a bearer token cannot be verified."""


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a token the same way the identity provider does (used by tests and local tooling)."""
    to_encode = data.copy()
    if expires_delta is not None:
        to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JOSEError as exc:
        raise TokenError("invalid_token") from exc


def caller_from_claims(claims: dict[str, Any]) -> Caller:
    subject_id = None
    for name in SUBJECT_CLAIMS:
        value = claims.get(name)
        if value not in (None, ""):
            subject_id = str(value)
            break

    role = claims.get("role")
    return Caller(
        subject_id=subject_id,
        role=str(role).lower() if role else None,
        display_name=claims.get("name"),
        email=claims.get("email"),
    )
