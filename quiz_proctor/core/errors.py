"""Error taxonomy raised by the core services and mapped to HTTP by the server."""

from __future__ import annotations


class QuizProctorError(Exception):
    """Base class for expected failures surfaced to callers."""


class NotFoundError(QuizProctorError):
    """Quiz or link is absent, unpublished, or not owned by the caller."""


class ForbiddenError(QuizProctorError):
    """Operation not allowed in the current state (closed window, published quiz)."""

    NOT_YET_OPEN = "not_yet_open"
    ALREADY_CLOSED = "already_closed"
    NOT_EDITABLE = "not_editable"

    def __init__(self, message: str, reason: str) -> None:
        super().__init__(message)
        self.reason = reason


class ConflictError(QuizProctorError):
    """An attempt already exists for this quiz and identity."""


class QuizValidationError(QuizProctorError):
    """Input failed validation (quiz draft, registration data, payload)."""


class InternalError(QuizProctorError):
    """Storage or unexpected failure."""
