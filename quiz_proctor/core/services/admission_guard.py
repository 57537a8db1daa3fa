"""Server-side gate deciding whether an attempt may be scored.

Checks run in order and stop at the first failure:

1. the quiz exists and is published (``NotFoundError``),
2. ``now`` lies inside the optional open/close window (``ForbiddenError``),
3. no earlier submission exists for the registration email (``ConflictError``).

Step 3 is a fast early rejection. The authoritative duplicate check is the
atomic insert in :class:`SubmissionStore`, which also covers two requests
racing past this guard at the same time.
"""

from __future__ import annotations

from datetime import datetime
import logging

from quiz_proctor.core.errors import ConflictError, ForbiddenError
from quiz_proctor.core.models import FieldType, Quiz
from quiz_proctor.core.services.quiz_repository import QuizRepository
from quiz_proctor.core.services.submission_store import SubmissionStore, normalize_email

logger = logging.getLogger(__name__)

_EMAIL_KEY = "email"


def attempt_email(quiz: Quiz, registration: dict[str, str]) -> str | None:
    """Return the deduplication email from registration data, if any.

    Uses the quiz's email-typed form fields first, then a plain ``email`` key.
    Attempts without an email are not deduplicated.
    """
    candidates = [f.name for f in quiz.form_fields if f.field_type == FieldType.EMAIL]
    candidates.extend(key for key in registration if key.strip().casefold() == _EMAIL_KEY)
    for key in candidates:
        value = registration.get(key)
        if isinstance(value, str) and normalize_email(value):
            return value
    return None


class AdmissionGuard:
    def __init__(self, repository: QuizRepository, store: SubmissionStore) -> None:
        self._repository = repository
        self._store = store

    def require_open_quiz(self, link_token: str, now: datetime) -> Quiz:
        """Steps 1 and 2: published quiz inside its attempt window."""
        quiz = self._repository.get_published_by_link(link_token)
        self.check_window(quiz, now)
        return quiz

    @staticmethod
    def check_window(quiz: Quiz, now: datetime) -> None:
        opens_at = quiz.settings.opens_at
        closes_at = quiz.settings.closes_at
        if opens_at is not None and now < opens_at:
            logger.info("Admission refused for quiz %s: not yet open", quiz.id)
            raise ForbiddenError("Quiz has not started yet", ForbiddenError.NOT_YET_OPEN)
        if closes_at is not None and now > closes_at:
            logger.info("Admission refused for quiz %s: already closed", quiz.id)
            raise ForbiddenError("Quiz has ended", ForbiddenError.ALREADY_CLOSED)

    def check_not_attempted(self, quiz: Quiz, registration: dict[str, str]) -> str | None:
        """Step 3: returns the email used as deduplication key, or ``None``."""
        email = attempt_email(quiz, registration)
        if email is not None and self._store.has_attempt(quiz.id, email):
            logger.info("Admission refused for quiz %s: already attempted", quiz.id)
            raise ConflictError("You have already attempted this quiz.")
        return email
