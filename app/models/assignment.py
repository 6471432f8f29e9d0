import uuid

from sqlalchemy import Column, DateTime, Float, String, Text, func

from app.db.base_class import Base


class Assignment(Base):
    """Read-only view of the assignment registry; CRUD lives with the assignment service."""

    __tablename__ = "assignments"

    id = Column(String(64), primary_key=True, default=lambda: uuid.uuid4().hex)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    due_at = Column(DateTime(timezone=True), nullable=True)
    max_points = Column(Float, nullable=False, default=100)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
