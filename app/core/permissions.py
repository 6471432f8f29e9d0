from fastapi import Depends

from app.core.current_user import get_current_user
from app.core.errors import Forbidden
from app.schemas.identity import Caller


def require_teacher(current_user: Caller = Depends(get_current_user)) -> Caller:
    if not current_user.is_teacher:
        raise Forbidden("Teacher role required")
    return current_user
