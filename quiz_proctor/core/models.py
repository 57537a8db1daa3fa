"""Domain models for proctored quizzes and their submissions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class QuestionType(str, Enum):
    MCQ = "mcq"
    TRUE_FALSE = "truefalse"
    SHORT = "short"


class FieldType(str, Enum):
    TEXT = "text"
    EMAIL = "email"
    NUMBER = "number"
    DROPDOWN = "dropdown"
    RADIO = "radio"


class SubmissionStatus(str, Enum):
    COMPLETED = "completed"
    TERMINATED = "terminated"


class ViolationKind(str, Enum):
    """Known violation kinds. Other string tags are accepted and counted too."""

    TAB_SWITCH = "tab_switch"
    FULLSCREEN_EXIT = "fullscreen_exit"


CHOICE_QUESTION_TYPES = frozenset({QuestionType.MCQ, QuestionType.TRUE_FALSE})
CHOICE_FIELD_TYPES = frozenset({FieldType.DROPDOWN, FieldType.RADIO})


@dataclass(slots=True)
class FormField:
    """Registration form field shown to the student before the attempt."""

    name: str
    field_type: FieldType = FieldType.TEXT
    required: bool = False
    options: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Question:
    """Graded question. Marks are stored as non-negative magnitudes."""

    id: str
    text: str
    question_type: QuestionType
    correct_answer: str
    options: list[str] = field(default_factory=list)
    positive_marks: float = 1.0
    negative_marks: float = 0.0


@dataclass(slots=True)
class QuizSettings:
    """Attempt rules for a quiz."""

    time_limit_minutes: int
    max_violations: int = 3
    passing_percentage: float = 40.0
    opens_at: datetime | None = None
    closes_at: datetime | None = None

    @property
    def time_limit_seconds(self) -> int:
        return int(self.time_limit_minutes * 60)


@dataclass(slots=True)
class QuizDraft:
    """Authoring input for creating, updating or republishing a quiz."""

    title: str
    settings: QuizSettings
    questions: list[Question]
    description: str = ""
    form_fields: list[FormField] = field(default_factory=list)
    is_published: bool = False


@dataclass(slots=True)
class Quiz:
    """Stored quiz owned by a teacher and shared through its link token."""

    id: str
    owner_id: str
    title: str
    description: str
    form_fields: list[FormField]
    questions: list[Question]
    settings: QuizSettings
    link_token: str
    is_published: bool = False
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)


@dataclass(slots=True)
class PublicQuestion:
    """Question as shown to a student: never carries the correct answer."""

    id: str
    text: str
    text_html: str
    question_type: QuestionType
    options: list[str]
    positive_marks: float
    negative_marks: float


@dataclass(slots=True)
class PublicQuiz:
    """Quiz metadata served to the student client."""

    title: str
    description: str
    link_token: str
    form_fields: list[FormField]
    questions: list[PublicQuestion]
    settings: QuizSettings


@dataclass(frozen=True, slots=True)
class Violation:
    kind: str
    timestamp: datetime


@dataclass(frozen=True, slots=True)
class SubmittedAnswer:
    """Raw selection sent by the client for one question."""

    question_id: str
    selected_answer: str = ""


@dataclass(frozen=True, slots=True)
class AnswerOutcome:
    """Scored answer stored on a submission."""

    question_id: str
    selected_answer: str
    is_correct: bool
    marks_awarded: float


@dataclass(slots=True)
class AttemptPayload:
    """Everything the client sends when an attempt reaches its terminal state."""

    registration: dict[str, str]
    answers: list[SubmittedAnswer]
    status: SubmissionStatus
    elapsed_seconds: int
    violations: list[Violation] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class Submission:
    """Persisted attempt. Created once, never updated."""

    id: str
    quiz_id: str
    registration: dict[str, str]
    answers: tuple[AnswerOutcome, ...]
    violations: tuple[Violation, ...]
    total_score: float
    max_score: float
    status: SubmissionStatus
    elapsed_seconds: int
    submitted_at: datetime


@dataclass(frozen=True, slots=True)
class SubmissionReceipt:
    submission_id: str
    total_score: float
    max_score: float
    passed: bool
    status: SubmissionStatus
