from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StorageFailure
from app.models.assignment import Assignment


def assignment_exists(db: Session, assignment_id: str) -> bool:
    try:
        return db.get(Assignment, assignment_id) is not None
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageFailure("Failed to look up assignment") from exc


def count_assignments(db: Session) -> int:
    try:
        return int(db.scalar(select(func.count(Assignment.id))) or 0)
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageFailure("Failed to count assignments") from exc
