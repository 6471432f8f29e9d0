"""
Submission lifecycle: upload, listing, file retrieval and grading.

Every operation takes the caller explicitly and decides authorization from
its role and subject id alone. The state machine is deliberately tiny:

    (create) -> submitted -> graded -> graded (re-grade overwrites)

Create writes the blob before inserting the record, so a failed upload can
leave an unreferenced blob behind but never a record without bytes.
"""
import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from app.core.config import MAX_UPLOAD_BYTES, STRICT_SUBMITTER_ROLE
from app.core.errors import BadRequest, Forbidden, NotFound, StorageFailure
from app.models.submission import STATUS_GRADED, STATUS_SUBMITTED, Submission
from app.repositories.submissions import SubmissionRepository
from app.schemas.identity import ROLE_STUDENT, Caller
from app.services.upload_validation import FileMeta, validate_upload
from app.storage.blob_store import BlobNotFound, BlobStore

logger = logging.getLogger(__name__)

DEFAULT_STUDENT_NAME = "Student"


@dataclass
class FileDownload:
    chunks: Iterator[bytes]
    file_name: str
    file_type: Optional[str]
    file_size: int


class SubmissionWorkflow:
    def __init__(
        self,
        repo: SubmissionRepository,
        blobs: BlobStore,
        *,
        assignment_exists: Optional[Callable[[str], bool]] = None,
        strict_submitter_role: bool = STRICT_SUBMITTER_ROLE,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
    ):
        self.repo = repo
        self.blobs = blobs
        self.assignment_exists = assignment_exists
        self.strict_submitter_role = strict_submitter_role
        self.max_upload_bytes = max_upload_bytes

    # -- authorization helpers -------------------------------------------------

    def _ensure_can_submit(self, caller: Caller) -> None:
        if caller.role is None:
            if self.strict_submitter_role:
                raise Forbidden("Only students can submit")
            # legacy tokens without a role are let through
            logger.warning("submission by caller without role subject=%s", caller.subject_id)
            return
        if caller.role != ROLE_STUDENT:
            raise Forbidden("Only students can submit")

    def _ensure_can_view(self, caller: Caller, submission: Submission) -> None:
        if caller.is_teacher:
            return
        if caller.subject_id is not None and caller.subject_id == submission.student_id:
            return
        raise Forbidden("Not authorized to view this file")

    def _check_assignment(self, assignment_id: str) -> None:
        if self.assignment_exists is None:
            return
        try:
            known = self.assignment_exists(assignment_id)
        except StorageFailure:
            logger.warning("could not verify assignment_id=%s, accepting", assignment_id)
            return
        if not known:
            # soft validation: log only
            logger.warning("submission references unknown assignment_id=%s", assignment_id)

    # -- operations ------------------------------------------------------------

    def create(
        self,
        caller: Caller,
        assignment_id: Optional[str],
        data: Optional[bytes],
        meta: Optional[FileMeta],
    ) -> Submission:
        self._ensure_can_submit(caller)

        assignment_id = (assignment_id or "").strip()
        if not assignment_id or not caller.subject_id:
            raise BadRequest("Missing assignmentId or studentId")

        validate_upload(data, meta, max_bytes=self.max_upload_bytes)
        self._check_assignment(assignment_id)

        storage_key = self.blobs.put(data, file_name=meta.file_name)

        record = Submission(
            assignment_id=assignment_id,
            student_id=caller.subject_id,
            student_name=caller.display_name or DEFAULT_STUDENT_NAME,
            student_email=caller.email or "",
            file_name=meta.file_name,
            file_size=len(data),
            file_type=meta.content_type,
            storage_key=storage_key,
            status=STATUS_SUBMITTED,
        )
        try:
            created = self.repo.insert(record)
        except StorageFailure:
            logger.warning("orphaned blob key=%s after failed insert", storage_key)
            raise

        logger.info(
            "submission created id=%s assignment_id=%s student_id=%s bytes=%d",
            created.id,
            created.assignment_id,
            created.student_id,
            created.file_size,
        )
        return created

    def list_submissions(self, caller: Caller) -> list[Submission]:
        if caller.is_teacher:
            return self.repo.find_all()
        if not caller.subject_id:
            return []
        return self.repo.find_by_student(caller.subject_id)

    def list_mine(self, caller: Caller) -> list[Submission]:
        if not caller.subject_id:
            raise BadRequest("No student id found")
        return self.repo.find_by_student(caller.subject_id)

    def retrieve_file(self, caller: Caller, submission_id: int) -> FileDownload:
        submission = self.repo.find_by_id(submission_id)
        if submission is None:
            raise NotFound("Submission not found")

        self._ensure_can_view(caller, submission)

        try:
            chunks = self.blobs.open_read(submission.storage_key)
        except BlobNotFound:
            logger.error(
                "blob missing for submission id=%s key=%s",
                submission.id,
                submission.storage_key,
            )
            raise NotFound("File not found on server")

        return FileDownload(
            chunks=chunks,
            file_name=submission.file_name,
            file_type=submission.file_type,
            file_size=submission.file_size,
        )

    def grade(
        self,
        caller: Caller,
        submission_id: int,
        grade: Optional[float],
        feedback: Optional[str] = None,
    ) -> Submission:
        if not caller.is_teacher:
            raise Forbidden("Only teachers can grade")

        # no range check here: 0-100 is a UI convention, not a rule of the workflow
        if grade is None or isinstance(grade, bool) or not math.isfinite(grade):
            raise BadRequest("grade must be a number")

        updated = self.repo.update(
            submission_id,
            {"grade": float(grade), "feedback": feedback, "status": STATUS_GRADED},
        )
        if updated is None:
            raise NotFound("Submission not found")

        logger.info("submission graded id=%s grade=%s by=%s", updated.id, updated.grade, caller.subject_id)
        return updated
