import logging
from typing import Any, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StorageFailure
from app.models.submission import STATUS_GRADED, Submission, utcnow

logger = logging.getLogger(__name__)


def _newest_first():
    # id breaks ties between rows created in the same instant
    return (Submission.created_at.desc(), Submission.id.desc())


class SubmissionRepository:
    """SQLAlchemy-backed store for submission records.

    Every database error is reported as StorageFailure; the session is rolled
    back first so the request can still answer cleanly.
    """

    def __init__(self, db: Session):
        self.db = db

    def _fail(self, action: str, exc: Exception) -> StorageFailure:
        self.db.rollback()
        logger.exception("submission repository %s failed: %s", action, exc)
        return StorageFailure(f"Failed to {action} submission")

    def insert(self, record: Submission) -> Submission:
        now = utcnow()
        record.created_at = now
        record.updated_at = now
        self.db.add(record)
        try:
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as exc:
            raise self._fail("save", exc)

        return record

    def find_by_id(self, submission_id: int) -> Optional[Submission]:
        try:
            return self.db.get(Submission, submission_id)
        except SQLAlchemyError as exc:
            raise self._fail("load", exc)

    def find_all(self) -> list[Submission]:
        try:
            return list(self.db.scalars(select(Submission).order_by(*_newest_first())))
        except SQLAlchemyError as exc:
            raise self._fail("load", exc)

    def find_by_student(self, student_id: str) -> list[Submission]:
        try:
            return list(
                self.db.scalars(
                    select(Submission)
                    .where(Submission.student_id == student_id)
                    .order_by(*_newest_first())
                )
            )
        except SQLAlchemyError as exc:
            raise self._fail("load", exc)

    def update(self, submission_id: int, fields: dict[str, Any]) -> Optional[Submission]:
        """Apply ``fields`` in one UPDATE statement and return the fresh row, or None if absent."""
        values = dict(fields)
        values["updated_at"] = utcnow()
        try:
            result = self.db.execute(
                update(Submission)
                .where(Submission.id == submission_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("update", exc)

        if result.rowcount == 0:
            return None

        # drop any stale copy held by this session before re-reading
        self.db.expire_all()
        return self.find_by_id(submission_id)

    def counts(self) -> dict[str, int]:
        try:
            total = self.db.scalar(select(func.count(Submission.id))) or 0
            graded = (
                self.db.scalar(select(func.count(Submission.id)).where(Submission.status == STATUS_GRADED))
                or 0
            )
            students = self.db.scalar(select(func.count(func.distinct(Submission.student_id)))) or 0
        except SQLAlchemyError as exc:
            raise self._fail("count", exc)

        return {
            "total_submissions": int(total),
            "pending_grading": int(total - graded),
            "graded": int(graded),
            "total_students": int(students),
        }
