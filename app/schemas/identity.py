from typing import Optional

from pydantic import BaseModel, ConfigDict

ROLE_TEACHER = "teacher"
ROLE_STUDENT = "student"


class Caller(BaseModel):
    """Verified identity of whoever is making the request."""

    subject_id: Optional[str] = None
    role: Optional[str] = None
    display_name: Optional[str] = None
    email: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_teacher(self) -> bool:
        return self.role == ROLE_TEACHER
