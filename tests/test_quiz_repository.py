from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from quiz_proctor.core.errors import ForbiddenError, NotFoundError, QuizValidationError
from quiz_proctor.core.models import FieldType, FormField, Question, QuestionType
from quiz_proctor.core.services.quiz_repository import QuizRepository

OWNER = "teacher-1"


@pytest.fixture
def repository() -> QuizRepository:
    return QuizRepository()


def test_create_normalizes_questions(repository, draft_factory):
    quiz = repository.create(OWNER, draft_factory())

    assert len(quiz.link_token) == 10
    assert quiz.questions[1].correct_answer == "true"
    assert quiz.questions[1].options == ["true", "false"]
    assert quiz.questions[2].options == []
    assert not quiz.is_published


def test_link_tokens_are_unique(repository, draft_factory):
    tokens = {repository.create(OWNER, draft_factory()).link_token for _ in range(20)}
    assert len(tokens) == 20


def test_duplicate_or_missing_question_ids_are_replaced(repository, draft_factory):
    draft = draft_factory()
    draft.questions[1] = replace(draft.questions[1], id="q1")
    draft.questions[2] = replace(draft.questions[2], id="")
    quiz = repository.create(OWNER, draft)

    ids = [q.id for q in quiz.questions]
    assert ids[0] == "q1"
    assert len(set(ids)) == 3
    assert all(ids)


@pytest.mark.parametrize(
    "question",
    [
        Question("x", "Pick", QuestionType.MCQ, "C", ["A", "B"]),
        Question("x", "Pick", QuestionType.MCQ, "A", ["A"]),
        Question("x", "Fact", QuestionType.TRUE_FALSE, "maybe"),
        Question("x", "Say", QuestionType.SHORT, "   "),
        Question("x", "   ", QuestionType.SHORT, "x"),
        Question("x", "Say", QuestionType.SHORT, "x", negative_marks=-1),
    ],
)
def test_invalid_questions_are_rejected(repository, draft_factory, question):
    draft = draft_factory()
    draft.questions = [question]
    with pytest.raises(QuizValidationError):
        repository.create(OWNER, draft)


def test_invalid_settings_are_rejected(repository, draft_factory):
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    draft = draft_factory(opens_at=now, closes_at=now - timedelta(minutes=1))
    with pytest.raises(QuizValidationError):
        repository.create(OWNER, draft)

    draft = draft_factory(passing_percentage=120)
    with pytest.raises(QuizValidationError):
        repository.create(OWNER, draft)


def test_choice_form_field_needs_options(repository, draft_factory):
    draft = draft_factory()
    draft.form_fields.append(FormField(name="Section", field_type=FieldType.DROPDOWN))
    with pytest.raises(QuizValidationError):
        repository.create(OWNER, draft)


def test_naive_window_is_treated_as_utc(repository, draft_factory):
    quiz = repository.create(OWNER, draft_factory(opens_at=datetime(2026, 1, 1, 9, 0)))
    assert quiz.settings.opens_at == datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)


def test_other_owners_cannot_see_quiz(repository, draft_factory):
    quiz = repository.create(OWNER, draft_factory())
    with pytest.raises(NotFoundError):
        repository.get_for_owner("someone-else", quiz.id)
    assert repository.list_for_owner("someone-else") == []


def test_published_quiz_is_not_editable(repository, draft_factory):
    quiz = repository.create(OWNER, draft_factory())
    repository.update(OWNER, quiz.id, replace(draft_factory(), title="Renamed"))
    repository.publish(OWNER, quiz.id)

    with pytest.raises(ForbiddenError) as update_error:
        repository.update(OWNER, quiz.id, draft_factory())
    with pytest.raises(ForbiddenError):
        repository.delete(OWNER, quiz.id)
    assert update_error.value.reason == ForbiddenError.NOT_EDITABLE
    assert repository.get_published_by_link(quiz.link_token).title == "Renamed"


def test_republish_replaces_content_of_published_quiz(repository, draft_factory):
    quiz = repository.create(OWNER, draft_factory())
    with pytest.raises(ForbiddenError):
        repository.republish(OWNER, quiz.id, draft_factory())

    repository.publish(OWNER, quiz.id)
    updated = repository.republish(OWNER, quiz.id, replace(draft_factory(), title="Second run"))

    assert updated.is_published
    assert updated.link_token == quiz.link_token
    assert repository.get_published_by_link(quiz.link_token).title == "Second run"


def test_delete_removes_link(repository, draft_factory):
    quiz = repository.create(OWNER, draft_factory())
    repository.delete(OWNER, quiz.id)
    with pytest.raises(NotFoundError):
        repository.get_for_owner(OWNER, quiz.id)
