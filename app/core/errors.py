from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    ALREADY_REVIEWED = "already_reviewed"
    STATUS_NOT_ALLOWED = "status_not_allowed"
    VALIDATION_ERROR = "validation_error"
    UPSTREAM_SERVICE_ERROR = "upstream_service_error"


class ModerationError(Exception):
    """Base error of the service; ``kind`` is what the HTTP boundary maps to a status code."""

    kind: ErrorKind = ErrorKind.VALIDATION_ERROR

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind


class NotFoundError(ModerationError):
    kind = ErrorKind.NOT_FOUND


class AlreadyReviewedError(ModerationError):
    kind = ErrorKind.ALREADY_REVIEWED


class StatusNotAllowedError(ModerationError):
    kind = ErrorKind.STATUS_NOT_ALLOWED


class ValidationError(ModerationError):
    kind = ErrorKind.VALIDATION_ERROR


class UpstreamServiceError(ModerationError):
    kind = ErrorKind.UPSTREAM_SERVICE_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
