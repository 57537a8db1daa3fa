"""Business logic shared by the HTTP API and the command line entry point."""

from __future__ import annotations

from datetime import datetime
import logging
import re
from threading import Lock
from uuid import uuid4

from quiz_proctor.core.errors import ConflictError, InternalError, QuizValidationError
from quiz_proctor.core.markdown_math_renderer import renderer
from quiz_proctor.core.models import (
    CHOICE_FIELD_TYPES,
    AttemptPayload,
    FieldType,
    PublicQuestion,
    PublicQuiz,
    Quiz,
    QuizDraft,
    Submission,
    SubmissionReceipt,
    SubmissionStatus,
    ViolationKind,
    utc_now,
)
from quiz_proctor.core.results_exporter import render_submissions_csv
from quiz_proctor.core.services.admission_guard import AdmissionGuard
from quiz_proctor.core.services.quiz_repository import QuizRepository
from quiz_proctor.core.services.scoring import answers_by_question, is_passing, score_attempt
from quiz_proctor.core.services.submission_store import SubmissionStore

logger = logging.getLogger(__name__)

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ProctorManager:
    """Facade for quiz services: Repository, SubmissionStore, AdmissionGuard and scoring."""

    def __init__(
        self,
        repository: QuizRepository | None = None,
        store: SubmissionStore | None = None,
    ) -> None:
        self._lock = Lock()
        self._repository = repository or QuizRepository()
        self._store = store or SubmissionStore()
        self._guard = AdmissionGuard(self._repository, self._store)

    # --- Teacher operations ---

    def create_quiz(self, owner_id: str, draft: QuizDraft) -> Quiz:
        with self._lock:
            return self._repository.create(owner_id, draft)

    def list_quizzes(self, owner_id: str) -> list[Quiz]:
        with self._lock:
            return self._repository.list_for_owner(owner_id)

    def get_quiz(self, owner_id: str, quiz_id: str) -> Quiz:
        with self._lock:
            return self._repository.get_for_owner(owner_id, quiz_id)

    def update_quiz(self, owner_id: str, quiz_id: str, draft: QuizDraft) -> Quiz:
        with self._lock:
            return self._repository.update(owner_id, quiz_id, draft)

    def delete_quiz(self, owner_id: str, quiz_id: str) -> None:
        with self._lock:
            self._repository.delete(owner_id, quiz_id)

    def publish_quiz(self, owner_id: str, quiz_id: str) -> Quiz:
        with self._lock:
            return self._repository.publish(owner_id, quiz_id)

    def republish_quiz(self, owner_id: str, quiz_id: str, draft: QuizDraft) -> Quiz:
        with self._lock:
            return self._repository.republish(owner_id, quiz_id, draft)

    def list_submissions(self, owner_id: str, quiz_id: str) -> list[Submission]:
        quiz = self.get_quiz(owner_id, quiz_id)
        return self._store.list_for_quiz(quiz.id)

    def export_submissions_csv(self, owner_id: str, quiz_id: str) -> str:
        quiz = self.get_quiz(owner_id, quiz_id)
        return render_submissions_csv(quiz, self._store.list_for_quiz(quiz.id))

    # --- Student operations ---

    def get_public_quiz(self, link_token: str, now: datetime | None = None) -> PublicQuiz:
        """Published, in-window quiz metadata without correct answers."""
        with self._lock:
            quiz = self._guard.require_open_quiz(link_token, now or utc_now())
        return to_public_quiz(quiz)

    def submit_attempt(
        self,
        link_token: str,
        payload: AttemptPayload,
        now: datetime | None = None,
    ) -> SubmissionReceipt:
        """Admit, score and persist one attempt.

        Nothing is written unless every admission check passes; the store's
        atomic insert settles races between attempts with the same email.
        """
        submitted_at = now or utc_now()
        with self._lock:
            quiz = self._guard.require_open_quiz(link_token, submitted_at)
        registration = validate_registration(quiz, payload.registration)
        email = self._guard.check_not_attempted(quiz, registration)

        result = score_attempt(quiz.questions, answers_by_question(payload.answers))
        status = (
            SubmissionStatus.TERMINATED
            if payload.status == SubmissionStatus.TERMINATED
            else SubmissionStatus.COMPLETED
        )
        submission = Submission(
            id=uuid4().hex,
            quiz_id=quiz.id,
            registration=registration,
            answers=result.answers,
            violations=tuple(payload.violations),
            total_score=result.total_score,
            max_score=result.max_score,
            status=status,
            elapsed_seconds=max(0, int(payload.elapsed_seconds)),
            submitted_at=submitted_at,
        )
        try:
            self._store.insert(submission, email)
        except ConflictError:
            logger.info("Duplicate attempt rejected for quiz %s", quiz.id)
            raise
        except Exception as exc:
            logger.exception("Failed to store submission for quiz %s", quiz.id)
            raise InternalError("Failed to store submission") from exc

        passed = is_passing(result.total_score, result.max_score, quiz.settings.passing_percentage)
        logger.info(
            "Submission %s stored for quiz %s: %s/%s (%s, pass=%s)",
            submission.id,
            quiz.id,
            result.total_score,
            result.max_score,
            status.value,
            passed,
        )
        return SubmissionReceipt(
            submission_id=submission.id,
            total_score=result.total_score,
            max_score=result.max_score,
            passed=passed,
            status=status,
        )

    def log_violation(self, link_token: str, kind: str) -> str:
        """Advisory violation report; never changes any stored score."""
        with self._lock:
            quiz = self._repository.get_published_by_link(link_token)
        known = {k.value for k in ViolationKind}
        logger.info(
            "Violation reported for quiz %s: %s%s",
            quiz.id,
            kind,
            "" if kind in known else " (unrecognized kind)",
        )
        return kind


def to_public_quiz(quiz: Quiz) -> PublicQuiz:
    return PublicQuiz(
        title=quiz.title,
        description=quiz.description,
        link_token=quiz.link_token,
        form_fields=list(quiz.form_fields),
        questions=[
            PublicQuestion(
                id=question.id,
                text=question.text,
                text_html=renderer.render_fragment(question.text),
                question_type=question.question_type,
                options=list(question.options),
                positive_marks=question.positive_marks,
                negative_marks=question.negative_marks,
            )
            for question in quiz.questions
        ],
        settings=quiz.settings,
    )


def validate_registration(quiz: Quiz, registration: dict[str, str]) -> dict[str, str]:
    """Check registration data against the quiz form; returns a trimmed copy."""
    if not isinstance(registration, dict):
        raise QuizValidationError("Registration data is required.")
    cleaned = {
        str(key): value.strip() if isinstance(value, str) else str(value)
        for key, value in registration.items()
    }
    for form_field in quiz.form_fields:
        value = cleaned.get(form_field.name, "")
        if not value:
            if form_field.required:
                raise QuizValidationError(f"'{form_field.name}' is required.")
            continue
        if form_field.field_type == FieldType.EMAIL and not _EMAIL_PATTERN.match(value):
            raise QuizValidationError(f"'{form_field.name}' must be a valid email address.")
        if form_field.field_type == FieldType.NUMBER:
            try:
                float(value)
            except ValueError as exc:
                raise QuizValidationError(f"'{form_field.name}' must be a number.") from exc
        if form_field.field_type in CHOICE_FIELD_TYPES and value not in form_field.options:
            raise QuizValidationError(f"'{form_field.name}' must be one of the listed options.")
    return cleaned
