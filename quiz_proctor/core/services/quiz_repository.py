"""Service for storing quizzes and enforcing their authoring rules."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
import logging
import secrets
from threading import Lock
from uuid import uuid4

from quiz_proctor.constants.quiz_constants import LINK_TOKEN_LENGTH, TRUE_FALSE_VALUES
from quiz_proctor.core.errors import ForbiddenError, NotFoundError, QuizValidationError
from quiz_proctor.core.models import (
    CHOICE_FIELD_TYPES,
    FormField,
    Question,
    QuestionType,
    Quiz,
    QuizDraft,
    QuizSettings,
    utc_now,
)

logger = logging.getLogger(__name__)


class QuizRepository:
    """In-memory quiz store keyed by id and by shareable link token.

    Stored quizzes are replaced, never mutated in place, so a quiz snapshot
    handed to a caller stays stable while it is being scored.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._quizzes: dict[str, Quiz] = {}
        self._ids_by_link: dict[str, str] = {}

    def create(self, owner_id: str, draft: QuizDraft) -> Quiz:
        prepared = self._prepare_draft(draft)
        with self._lock:
            link_token = self._next_link_token()
            quiz = Quiz(
                id=uuid4().hex,
                owner_id=owner_id,
                title=prepared.title,
                description=prepared.description,
                form_fields=prepared.form_fields,
                questions=prepared.questions,
                settings=prepared.settings,
                link_token=link_token,
                is_published=prepared.is_published,
            )
            self._quizzes[quiz.id] = quiz
            self._ids_by_link[link_token] = quiz.id
        logger.info("Quiz %s created by %s (published=%s)", quiz.id, owner_id, quiz.is_published)
        return quiz

    def list_for_owner(self, owner_id: str) -> list[Quiz]:
        with self._lock:
            owned = [quiz for quiz in self._quizzes.values() if quiz.owner_id == owner_id]
        return sorted(owned, key=lambda quiz: quiz.created_at, reverse=True)

    def get_for_owner(self, owner_id: str, quiz_id: str) -> Quiz:
        with self._lock:
            quiz = self._quizzes.get(quiz_id)
        if quiz is None or quiz.owner_id != owner_id:
            raise NotFoundError("Quiz not found")
        return quiz

    def get_published_by_link(self, link_token: str) -> Quiz:
        with self._lock:
            quiz_id = self._ids_by_link.get(link_token)
            quiz = self._quizzes.get(quiz_id) if quiz_id else None
        if quiz is None or not quiz.is_published:
            raise NotFoundError("Quiz not found")
        return quiz

    def update(self, owner_id: str, quiz_id: str, draft: QuizDraft) -> Quiz:
        prepared = self._prepare_draft(draft)
        with self._lock:
            current = self._require_editable(owner_id, quiz_id)
            updated = self._apply_draft(current, prepared, is_published=prepared.is_published)
            self._quizzes[quiz_id] = updated
        logger.info("Quiz %s updated", quiz_id)
        return updated

    def delete(self, owner_id: str, quiz_id: str) -> None:
        with self._lock:
            current = self._require_editable(owner_id, quiz_id)
            del self._quizzes[quiz_id]
            self._ids_by_link.pop(current.link_token, None)
        logger.info("Quiz %s deleted", quiz_id)

    def publish(self, owner_id: str, quiz_id: str) -> Quiz:
        with self._lock:
            current = self._require_owned(owner_id, quiz_id)
            if current.is_published:
                return current
            published = replace(current, is_published=True, updated_at=utc_now())
            self._quizzes[quiz_id] = published
        logger.info("Quiz %s published with link %s", quiz_id, published.link_token)
        return published

    def republish(self, owner_id: str, quiz_id: str, draft: QuizDraft) -> Quiz:
        """Replace the content of a published quiz, validated like a new quiz."""
        prepared = self._prepare_draft(draft)
        with self._lock:
            current = self._require_owned(owner_id, quiz_id)
            if not current.is_published:
                raise ForbiddenError(
                    "Only published quizzes can be republished", ForbiddenError.NOT_EDITABLE
                )
            updated = self._apply_draft(current, prepared, is_published=True)
            self._quizzes[quiz_id] = updated
        logger.info("Quiz %s republished with edits", quiz_id)
        return updated

    # --- Internals ---

    def _require_owned(self, owner_id: str, quiz_id: str) -> Quiz:
        quiz = self._quizzes.get(quiz_id)
        if quiz is None or quiz.owner_id != owner_id:
            raise NotFoundError("Quiz not found")
        return quiz

    def _require_editable(self, owner_id: str, quiz_id: str) -> Quiz:
        quiz = self._require_owned(owner_id, quiz_id)
        if quiz.is_published:
            raise ForbiddenError("Quiz is already published", ForbiddenError.NOT_EDITABLE)
        return quiz

    @staticmethod
    def _apply_draft(current: Quiz, draft: QuizDraft, *, is_published: bool) -> Quiz:
        return replace(
            current,
            title=draft.title,
            description=draft.description,
            form_fields=draft.form_fields,
            questions=draft.questions,
            settings=draft.settings,
            is_published=is_published,
            updated_at=utc_now(),
        )

    def _next_link_token(self) -> str:
        while True:
            token = secrets.token_urlsafe(LINK_TOKEN_LENGTH)[:LINK_TOKEN_LENGTH]
            if token not in self._ids_by_link:
                return token

    def _prepare_draft(self, draft: QuizDraft) -> QuizDraft:
        """Validate and normalize a draft before storage."""
        title = (draft.title or "").strip()
        if not title:
            raise QuizValidationError("Quiz title must not be empty.")
        if draft.settings is None:
            raise QuizValidationError("Quiz settings are required.")
        if not draft.questions:
            raise QuizValidationError("Quiz must contain at least one question.")

        settings = self._validate_settings(draft.settings)
        form_fields = self._validate_form_fields(draft.form_fields)

        questions: list[Question] = []
        seen_ids: set[str] = set()
        for position, question in enumerate(draft.questions, start=1):
            prepared = self._prepare_question(question, position)
            if not prepared.id or prepared.id in seen_ids:
                prepared = replace(prepared, id=uuid4().hex)
            seen_ids.add(prepared.id)
            questions.append(prepared)

        return QuizDraft(
            title=title,
            description=(draft.description or "").strip(),
            form_fields=form_fields,
            questions=questions,
            settings=settings,
            is_published=draft.is_published,
        )

    @staticmethod
    def _validate_settings(settings: QuizSettings) -> QuizSettings:
        if settings.time_limit_minutes <= 0:
            raise QuizValidationError("Time limit must be a positive number of minutes.")
        if settings.max_violations < 0:
            raise QuizValidationError("Maximum violations cannot be negative.")
        if not 0 <= settings.passing_percentage <= 100:
            raise QuizValidationError("Passing percentage must be between 0 and 100.")
        opens_at = _as_utc(settings.opens_at)
        closes_at = _as_utc(settings.closes_at)
        if opens_at is not None and closes_at is not None and closes_at < opens_at:
            raise QuizValidationError("Quiz must close after it opens.")
        return replace(settings, opens_at=opens_at, closes_at=closes_at)

    @staticmethod
    def _validate_form_fields(form_fields: list[FormField]) -> list[FormField]:
        cleaned: list[FormField] = []
        names: set[str] = set()
        for form_field in form_fields:
            name = form_field.name.strip()
            if not name:
                raise QuizValidationError("Form field name must not be empty.")
            if name in names:
                raise QuizValidationError(f"Duplicate form field '{name}'.")
            names.add(name)
            options = [option.strip() for option in form_field.options if option.strip()]
            if form_field.field_type in CHOICE_FIELD_TYPES and not options:
                raise QuizValidationError(f"Form field '{name}' needs at least one option.")
            cleaned.append(replace(form_field, name=name, options=options))
        return cleaned

    @staticmethod
    def _prepare_question(question: Question, position: int) -> Question:
        text = question.text.strip()
        if not text:
            raise QuizValidationError(f"Question {position}: text must not be empty.")
        if question.positive_marks < 0 or question.negative_marks < 0:
            raise QuizValidationError(f"Question {position}: marks cannot be negative.")

        correct = question.correct_answer.strip()
        options = [option.strip() for option in question.options]
        if question.question_type == QuestionType.MCQ:
            if len(options) < 2 or any(not option for option in options):
                raise QuizValidationError(
                    f"Question {position}: multiple choice needs at least two non-empty options."
                )
            if correct not in options:
                raise QuizValidationError(
                    f"Question {position}: correct answer must be one of the options."
                )
        elif question.question_type == QuestionType.TRUE_FALSE:
            correct = correct.lower()
            options = list(TRUE_FALSE_VALUES)
            if correct not in TRUE_FALSE_VALUES:
                raise QuizValidationError(
                    f"Question {position}: true/false answer must be 'true' or 'false'."
                )
        else:
            options = []
            if not correct:
                raise QuizValidationError(f"Question {position}: correct answer must not be empty.")

        return replace(question, text=text, options=options, correct_answer=correct)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
