from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class SubmissionError(Exception):
    """Base class for every failure the submission workflow reports to a caller."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class BadRequest(SubmissionError):
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthorized(SubmissionError):
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(SubmissionError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(SubmissionError):
    status_code = status.HTTP_404_NOT_FOUND


class StorageFailure(SubmissionError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


async def submission_error_handler(request: Request, exc: SubmissionError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.reason},
        headers=headers,
    )


def describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}" if loc else err.get("msg", "invalid value"))
    return "Invalid request: " + "; ".join(parts) if parts else "Invalid request"


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # malformed input is reported like any other BadRequest
    return await submission_error_handler(request, BadRequest(describe_validation_error(exc)))
