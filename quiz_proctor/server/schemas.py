"""Pydantic payload schemas for the HTTP API and the student client."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from quiz_proctor.constants.quiz_constants import (
    DEFAULT_MAX_VIOLATIONS,
    DEFAULT_NEGATIVE_MARKS,
    DEFAULT_PASSING_PERCENTAGE,
    DEFAULT_POSITIVE_MARKS,
)
from quiz_proctor.core.models import (
    AttemptPayload,
    FieldType,
    FormField,
    PublicQuestion,
    PublicQuiz,
    Question,
    QuestionType,
    Quiz,
    QuizDraft,
    QuizSettings,
    Submission,
    SubmissionReceipt,
    SubmissionStatus,
    SubmittedAnswer,
    Violation,
    utc_now,
)


class FormFieldSchema(BaseModel):
    name: str
    field_type: FieldType = FieldType.TEXT
    required: bool = False
    options: list[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, form_field: FormField) -> "FormFieldSchema":
        return cls(
            name=form_field.name,
            field_type=form_field.field_type,
            required=form_field.required,
            options=list(form_field.options),
        )

    def to_domain(self) -> FormField:
        return FormField(
            name=self.name,
            field_type=self.field_type,
            required=self.required,
            options=list(self.options),
        )


class SettingsSchema(BaseModel):
    time_limit_minutes: int = Field(gt=0)
    max_violations: int = Field(default=DEFAULT_MAX_VIOLATIONS, ge=0)
    passing_percentage: float = Field(default=DEFAULT_PASSING_PERCENTAGE, ge=0, le=100)
    opens_at: datetime | None = None
    closes_at: datetime | None = None

    @classmethod
    def from_domain(cls, settings: QuizSettings) -> "SettingsSchema":
        return cls(
            time_limit_minutes=settings.time_limit_minutes,
            max_violations=settings.max_violations,
            passing_percentage=settings.passing_percentage,
            opens_at=settings.opens_at,
            closes_at=settings.closes_at,
        )

    def to_domain(self) -> QuizSettings:
        return QuizSettings(
            time_limit_minutes=self.time_limit_minutes,
            max_violations=self.max_violations,
            passing_percentage=self.passing_percentage,
            opens_at=self.opens_at,
            closes_at=self.closes_at,
        )


class QuestionSchema(BaseModel):
    """Teacher-facing question, including the correct answer."""

    id: str = ""
    text: str
    question_type: QuestionType
    options: list[str] = Field(default_factory=list)
    correct_answer: str
    positive_marks: float = Field(default=DEFAULT_POSITIVE_MARKS, ge=0)
    negative_marks: float = Field(default=DEFAULT_NEGATIVE_MARKS, ge=0)

    @classmethod
    def from_domain(cls, question: Question) -> "QuestionSchema":
        return cls(
            id=question.id,
            text=question.text,
            question_type=question.question_type,
            options=list(question.options),
            correct_answer=question.correct_answer,
            positive_marks=question.positive_marks,
            negative_marks=question.negative_marks,
        )

    def to_domain(self) -> Question:
        return Question(
            id=self.id,
            text=self.text,
            question_type=self.question_type,
            options=list(self.options),
            correct_answer=self.correct_answer,
            positive_marks=self.positive_marks,
            negative_marks=self.negative_marks,
        )


class QuizDraftSchema(BaseModel):
    title: str
    description: str = ""
    form_fields: list[FormFieldSchema] = Field(default_factory=list)
    questions: list[QuestionSchema]
    settings: SettingsSchema
    is_published: bool = False

    def to_domain(self) -> QuizDraft:
        return QuizDraft(
            title=self.title,
            description=self.description,
            form_fields=[f.to_domain() for f in self.form_fields],
            questions=[q.to_domain() for q in self.questions],
            settings=self.settings.to_domain(),
            is_published=self.is_published,
        )


class QuizSchema(BaseModel):
    id: str
    owner_id: str
    title: str
    description: str
    form_fields: list[FormFieldSchema]
    questions: list[QuestionSchema]
    settings: SettingsSchema
    link_token: str
    is_published: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, quiz: Quiz) -> "QuizSchema":
        return cls(
            id=quiz.id,
            owner_id=quiz.owner_id,
            title=quiz.title,
            description=quiz.description,
            form_fields=[FormFieldSchema.from_domain(f) for f in quiz.form_fields],
            questions=[QuestionSchema.from_domain(q) for q in quiz.questions],
            settings=SettingsSchema.from_domain(quiz.settings),
            link_token=quiz.link_token,
            is_published=quiz.is_published,
            created_at=quiz.created_at,
            updated_at=quiz.updated_at,
        )


class PublicQuestionSchema(BaseModel):
    """Student-facing question. There is deliberately no correct answer field."""

    id: str
    text: str
    text_html: str
    question_type: QuestionType
    options: list[str]
    positive_marks: float
    negative_marks: float

    @classmethod
    def from_domain(cls, question: PublicQuestion) -> "PublicQuestionSchema":
        return cls(
            id=question.id,
            text=question.text,
            text_html=question.text_html,
            question_type=question.question_type,
            options=list(question.options),
            positive_marks=question.positive_marks,
            negative_marks=question.negative_marks,
        )

    def to_domain(self) -> PublicQuestion:
        return PublicQuestion(
            id=self.id,
            text=self.text,
            text_html=self.text_html,
            question_type=self.question_type,
            options=list(self.options),
            positive_marks=self.positive_marks,
            negative_marks=self.negative_marks,
        )


class PublicQuizSchema(BaseModel):
    title: str
    description: str
    link_token: str
    form_fields: list[FormFieldSchema]
    questions: list[PublicQuestionSchema]
    settings: SettingsSchema

    @classmethod
    def from_domain(cls, quiz: PublicQuiz) -> "PublicQuizSchema":
        return cls(
            title=quiz.title,
            description=quiz.description,
            link_token=quiz.link_token,
            form_fields=[FormFieldSchema.from_domain(f) for f in quiz.form_fields],
            questions=[PublicQuestionSchema.from_domain(q) for q in quiz.questions],
            settings=SettingsSchema.from_domain(quiz.settings),
        )

    def to_domain(self) -> PublicQuiz:
        return PublicQuiz(
            title=self.title,
            description=self.description,
            link_token=self.link_token,
            form_fields=[f.to_domain() for f in self.form_fields],
            questions=[q.to_domain() for q in self.questions],
            settings=self.settings.to_domain(),
        )


class AnswerSchema(BaseModel):
    question_id: str
    selected_answer: str | None = ""


class ViolationSchema(BaseModel):
    kind: str
    timestamp: datetime = Field(default_factory=utc_now)

    @classmethod
    def from_domain(cls, violation: Violation) -> "ViolationSchema":
        return cls(kind=violation.kind, timestamp=violation.timestamp)


RegistrationValue = str | int | float | bool | None


def _registration_text(value: RegistrationValue) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class SubmitPayload(BaseModel):
    registration: dict[str, RegistrationValue]
    answers: list[AnswerSchema] = Field(default_factory=list)
    status: str = SubmissionStatus.COMPLETED.value
    elapsed_seconds: int = 0
    violations: list[ViolationSchema] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, payload: AttemptPayload) -> "SubmitPayload":
        return cls(
            registration=dict(payload.registration),
            answers=[
                AnswerSchema(question_id=a.question_id, selected_answer=a.selected_answer)
                for a in payload.answers
            ],
            status=payload.status.value,
            elapsed_seconds=payload.elapsed_seconds,
            violations=[ViolationSchema.from_domain(v) for v in payload.violations],
        )

    def to_domain(self) -> AttemptPayload:
        # only an explicit "terminated" keeps that status
        status = (
            SubmissionStatus.TERMINATED
            if self.status == SubmissionStatus.TERMINATED.value
            else SubmissionStatus.COMPLETED
        )
        return AttemptPayload(
            registration={key: _registration_text(value) for key, value in self.registration.items()},
            answers=[
                SubmittedAnswer(question_id=a.question_id, selected_answer=a.selected_answer or "")
                for a in self.answers
            ],
            status=status,
            elapsed_seconds=max(0, self.elapsed_seconds),
            violations=[Violation(kind=v.kind, timestamp=v.timestamp) for v in self.violations],
        )


class ReceiptSchema(BaseModel):
    submission_id: str
    total_score: float
    max_score: float
    pass_: bool = Field(alias="pass")
    status: SubmissionStatus

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_domain(cls, receipt: SubmissionReceipt) -> "ReceiptSchema":
        return cls(
            submission_id=receipt.submission_id,
            total_score=receipt.total_score,
            max_score=receipt.max_score,
            pass_=receipt.passed,
            status=receipt.status,
        )

    def to_domain(self) -> SubmissionReceipt:
        return SubmissionReceipt(
            submission_id=self.submission_id,
            total_score=self.total_score,
            max_score=self.max_score,
            passed=self.pass_,
            status=self.status,
        )


class ViolationReport(BaseModel):
    kind: str


class AnswerOutcomeSchema(BaseModel):
    question_id: str
    selected_answer: str
    is_correct: bool
    marks_awarded: float


class SubmissionSchema(BaseModel):
    id: str
    quiz_id: str
    registration: dict[str, str]
    answers: list[AnswerOutcomeSchema]
    violations: list[ViolationSchema]
    total_score: float
    max_score: float
    status: SubmissionStatus
    elapsed_seconds: int
    submitted_at: datetime

    @classmethod
    def from_domain(cls, submission: Submission) -> "SubmissionSchema":
        return cls(
            id=submission.id,
            quiz_id=submission.quiz_id,
            registration=dict(submission.registration),
            answers=[
                AnswerOutcomeSchema(
                    question_id=a.question_id,
                    selected_answer=a.selected_answer,
                    is_correct=a.is_correct,
                    marks_awarded=a.marks_awarded,
                )
                for a in submission.answers
            ],
            violations=[ViolationSchema.from_domain(v) for v in submission.violations],
            total_score=submission.total_score,
            max_score=submission.max_score,
            status=submission.status,
            elapsed_seconds=submission.elapsed_seconds,
            submitted_at=submission.submitted_at,
        )
