from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import StreamingResponse

from app.core.config import MAX_UPLOAD_BYTES, UPLOAD_CHUNK_SIZE
from app.core.current_user import get_current_user
from app.core.deps import get_workflow
from app.schemas.identity import Caller
from app.schemas.submission import SubmissionGradeUpdate, SubmissionRead
from app.services.submission_workflow import SubmissionWorkflow
from app.services.upload_validation import FileMeta

router = APIRouter()


def _read_upload(file: UploadFile, limit: int) -> bytes:
    # stop one byte past the limit; the workflow rejects anything that long
    buf = bytearray()
    while len(buf) <= limit:
        chunk = file.file.read(UPLOAD_CHUNK_SIZE)
        if not chunk:
            break
        buf.extend(chunk)
    return bytes(buf)


def _content_disposition(file_name: str) -> str:
    ascii_name = file_name.encode("ascii", "ignore").decode("ascii").replace('"', "") or "download"
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(file_name)}"


@router.post(
    "/submissions",
    response_model=SubmissionRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing assignmentId/file, file too large or file type not allowed"},
        403: {"description": "Only students can submit"},
    },
)
def create_submission(
    assignment_id: Optional[str] = Form(None, alias="assignmentId"),
    file: Optional[UploadFile] = File(None),
    workflow: SubmissionWorkflow = Depends(get_workflow),
    me: Caller = Depends(get_current_user),
):
    data = None
    meta = None
    if file is not None:
        data = _read_upload(file, MAX_UPLOAD_BYTES)
        meta = FileMeta(file_name=file.filename or "", content_type=file.content_type)

    return workflow.create(me, assignment_id, data, meta)


@router.get("/submissions", response_model=list[SubmissionRead])
def list_submissions(
    workflow: SubmissionWorkflow = Depends(get_workflow),
    me: Caller = Depends(get_current_user),
):
    return workflow.list_submissions(me)


@router.get(
    "/submissions/mine",
    response_model=list[SubmissionRead],
    responses={400: {"description": "No student id found"}},
)
def my_submissions(
    workflow: SubmissionWorkflow = Depends(get_workflow),
    me: Caller = Depends(get_current_user),
):
    return workflow.list_mine(me)


@router.get(
    "/submissions/{submission_id}/file",
    response_class=StreamingResponse,
    responses={
        403: {"description": "Not authorized to view this file"},
        404: {"description": "Submission or stored file not found"},
    },
)
def download_submission_file(
    submission_id: int,
    workflow: SubmissionWorkflow = Depends(get_workflow),
    me: Caller = Depends(get_current_user),
):
    download = workflow.retrieve_file(me, submission_id)
    return StreamingResponse(
        download.chunks,
        media_type=download.file_type or "application/octet-stream",
        headers={"Content-Disposition": _content_disposition(download.file_name)},
    )


@router.post(
    "/submissions/{submission_id}/grade",
    response_model=SubmissionRead,
    responses={
        403: {"description": "Only teachers can grade"},
        404: {"description": "Submission not found"},
    },
)
def grade_submission(
    submission_id: int,
    payload: SubmissionGradeUpdate,
    workflow: SubmissionWorkflow = Depends(get_workflow),
    me: Caller = Depends(get_current_user),
):
    return workflow.grade(me, submission_id, payload.grade, payload.feedback)
