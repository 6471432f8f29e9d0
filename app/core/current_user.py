import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.errors import Unauthorized
from app.core.security import TokenError, caller_from_claims, decode_access_token
from app.schemas.identity import Caller

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Caller:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthorized("Not authenticated")

    try:
        claims = decode_access_token(credentials.credentials)
    except TokenError:
        logger.info("rejected bearer token")
        raise Unauthorized("Invalid or expired token")

    return caller_from_claims(claims)
