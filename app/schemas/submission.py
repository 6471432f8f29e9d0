from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel


class SubmissionRead(BaseModel):
    id: int
    assignment_id: str
    student_id: str
    student_name: str
    student_email: str
    file_name: str
    file_size: int
    file_type: Optional[str] = None
    status: str
    grade: Optional[float] = None
    feedback: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class SubmissionGradeUpdate(BaseModel):
    # strict so booleans and numeric strings are rejected; a missing grade is left to the workflow
    grade: Optional[Union[StrictInt, StrictFloat]] = None
    feedback: Optional[str] = None
