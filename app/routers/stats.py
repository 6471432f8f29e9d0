from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_submission_repo
from app.core.permissions import require_teacher
from app.repositories.submissions import SubmissionRepository
from app.schemas.identity import Caller
from app.schemas.stats import TeacherStats
from app.services.assignment_registry import count_assignments

router = APIRouter()


@router.get("/teacher", response_model=TeacherStats)
def teacher_stats(
    db: Session = Depends(get_db),
    repo: SubmissionRepository = Depends(get_submission_repo),
    me: Caller = Depends(require_teacher),
):
    counts = repo.counts()
    return TeacherStats(**counts, total_assignments=count_assignments(db))
