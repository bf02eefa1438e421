"""Typed failures raised by the review workflow.

Each error knows the HTTP status it maps to; ``app.main`` turns them into
JSON responses. Storage errors (SQLAlchemy) are not wrapped here.
"""


class WorkflowError(Exception):
    status_code = 400
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {
            "detail": self.message,
            "error": type(self).__name__,
            "retryable": self.retryable,
        }


class InvalidTransition(WorkflowError):
    """Operation not allowed from the current status, or not by this actor."""

    status_code = 409


class ValidationFailed(WorkflowError):
    status_code = 422

    def __init__(self, missing: list[str], message: str | None = None):
        self.missing = list(missing)
        super().__init__(message or f"Missing required: {', '.join(self.missing)}")

    def to_dict(self) -> dict:
        out = super().to_dict()
        out["missing"] = self.missing
        return out


class NotFound(WorkflowError):
    status_code = 404


class AccessDenied(WorkflowError):
    status_code = 403


class ConcurrentModification(WorkflowError):
    """The record changed between read and write. Re-read and retry."""

    status_code = 409
    retryable = True

    def __init__(
        self,
        resume_id: str | None,
        expected_version: int,
        actual_version: int | None = None,
        message: str | None = None,
    ):
        self.resume_id = resume_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            message or f"Resume {resume_id} was modified concurrently (expected version {expected_version})"
        )

    def to_dict(self) -> dict:
        out = super().to_dict()
        out["expected_version"] = self.expected_version
        if self.actual_version is not None:
            out["actual_version"] = self.actual_version
        return out
