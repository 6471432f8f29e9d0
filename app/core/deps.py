from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.config import UPLOAD_DIR
from app.db.session import SessionLocal
from app.repositories.submissions import SubmissionRepository
from app.services.assignment_registry import assignment_exists
from app.services.submission_workflow import SubmissionWorkflow
from app.storage.blob_store import BlobStore, LocalBlobStore


# every request that needs DB will get a fresh session, and it will always close.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@lru_cache
def get_blob_store() -> BlobStore:
    return LocalBlobStore(UPLOAD_DIR)


def get_submission_repo(db: Session = Depends(get_db)) -> SubmissionRepository:
    return SubmissionRepository(db)


def get_workflow(
    db: Session = Depends(get_db),
    repo: SubmissionRepository = Depends(get_submission_repo),
    blobs: BlobStore = Depends(get_blob_store),
) -> SubmissionWorkflow:
    return SubmissionWorkflow(
        repo,
        blobs,
        assignment_exists=lambda assignment_id: assignment_exists(db, assignment_id),
    )
