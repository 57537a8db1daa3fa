"""Shared fixtures for the core and server tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from quiz_proctor.core.models import (
    FieldType,
    FormField,
    Question,
    QuestionType,
    QuizDraft,
    QuizSettings,
)
from quiz_proctor.core.proctor_manager import ProctorManager

OWNER = "teacher-1"


def make_draft(
    *,
    opens_at: datetime | None = None,
    closes_at: datetime | None = None,
    max_violations: int = 3,
    passing_percentage: float = 40.0,
) -> QuizDraft:
    return QuizDraft(
        title="Algebra basics",
        description="Short warm-up",
        form_fields=[
            FormField(name="Name", field_type=FieldType.TEXT, required=True),
            FormField(name="Email", field_type=FieldType.EMAIL, required=True),
        ],
        questions=[
            Question(
                id="q1",
                text="What is $2 + 2$?",
                question_type=QuestionType.MCQ,
                options=["3", "4", "5"],
                correct_answer="4",
                positive_marks=2,
                negative_marks=1,
            ),
            Question(
                id="q2",
                text="Zero is even.",
                question_type=QuestionType.TRUE_FALSE,
                correct_answer="True",
            ),
            Question(
                id="q3",
                text="Name the variable in $x + 1$.",
                question_type=QuestionType.SHORT,
                correct_answer="x",
            ),
        ],
        settings=QuizSettings(
            time_limit_minutes=10,
            max_violations=max_violations,
            passing_percentage=passing_percentage,
            opens_at=opens_at,
            closes_at=closes_at,
        ),
    )


@pytest.fixture
def manager() -> ProctorManager:
    return ProctorManager()


@pytest.fixture
def published_quiz(manager: ProctorManager):
    quiz = manager.create_quiz(OWNER, make_draft())
    return manager.publish_quiz(OWNER, quiz.id)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def draft_factory():
    return make_draft
