from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Integer, String, Text

from app.db.base_class import Base

STATUS_SUBMITTED = "submitted"
STATUS_GRADED = "graded"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, index=True)

    # opaque reference into the assignment registry, no FK on purpose
    assignment_id = Column(String(64), nullable=False, index=True)
    student_id = Column(String(255), nullable=False, index=True)

    # identity snapshot taken at upload time
    student_name = Column(String(255), nullable=False, default="Student")
    student_email = Column(String(255), nullable=False, default="")

    file_name = Column(String(255), nullable=False)
    file_size = Column(Integer, nullable=False)
    file_type = Column(String(255), nullable=True)
    storage_key = Column(String(512), nullable=False, unique=True)

    status = Column(String(20), nullable=False, default=STATUS_SUBMITTED)

    # Grading fields (nullable until graded)
    grade = Column(Float, nullable=True)
    feedback = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
