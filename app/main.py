import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from app.core.errors import (
    SubmissionError,
    request_validation_error_handler,
    submission_error_handler,
)
from app.core.logging_middleware import LoggingMiddleware
from app.db.init_db import init_db
from app.routers.stats import router as stats_router
from app.routers.submissions import router as submissions_router

logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Assignment Submissions")

# Middleware
app.add_middleware(LoggingMiddleware)

# Workflow errors -> {"detail": reason} with the matching status code
app.add_exception_handler(SubmissionError, submission_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()


# Include routers
app.include_router(submissions_router, tags=["submissions"])
app.include_router(stats_router, prefix="/stats", tags=["stats"])
