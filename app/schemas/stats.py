from pydantic import BaseModel


class TeacherStats(BaseModel):
    total_submissions: int
    pending_grading: int
    graded: int
    total_students: int
    total_assignments: int
