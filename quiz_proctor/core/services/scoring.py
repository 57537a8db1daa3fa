"""Scoring engine: pure functions from (questions, answers) to marks.

Every quiz question is graded, answered or not. A missing selection is the
empty string, compared to the correct answer by exact string equality. A
wrong answer costs ``abs(negative_marks)``. Answers for question ids the quiz
does not contain are kept with zero marks so nothing the client sent is lost.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from quiz_proctor.core.models import AnswerOutcome, Question, SubmittedAnswer


@dataclass(frozen=True, slots=True)
class ScoreResult:
    answers: tuple[AnswerOutcome, ...]
    total_score: float
    max_score: float


def answers_by_question(answers: Iterable[SubmittedAnswer]) -> dict[str, str]:
    """Collapse submitted answers to a mapping; a later answer for the same id wins."""
    mapping: dict[str, str] = {}
    for answer in answers:
        mapping[answer.question_id] = answer.selected_answer or ""
    return mapping


def grade_answer(question: Question, selected_answer: str | None) -> AnswerOutcome:
    selected = selected_answer or ""
    is_correct = selected == question.correct_answer
    marks = float(question.positive_marks) if is_correct else -abs(float(question.negative_marks))
    if marks == 0:
        marks = 0.0  # no signed zero
    return AnswerOutcome(
        question_id=question.id,
        selected_answer=selected,
        is_correct=is_correct,
        marks_awarded=marks,
    )


def max_score(questions: Iterable[Question]) -> float:
    return float(sum(question.positive_marks for question in questions))


def score_attempt(questions: list[Question], answers: Mapping[str, str]) -> ScoreResult:
    """Grade every question and keep unknown answers with zero marks."""
    outcomes = [grade_answer(question, answers.get(question.id)) for question in questions]
    known_ids = {question.id for question in questions}
    for question_id, selected in answers.items():
        if question_id not in known_ids:
            outcomes.append(
                AnswerOutcome(
                    question_id=question_id,
                    selected_answer=selected or "",
                    is_correct=False,
                    marks_awarded=0.0,
                )
            )
    total = float(sum(outcome.marks_awarded for outcome in outcomes))
    return ScoreResult(
        answers=tuple(outcomes),
        total_score=total,
        max_score=max_score(questions),
    )


def score_percentage(total_score: float, max_score_value: float) -> float:
    """Percentage of the maximum; a quiz without graded weight counts as 100."""
    if max_score_value == 0:
        return 100.0
    return (total_score / max_score_value) * 100


def is_passing(total_score: float, max_score_value: float, passing_percentage: float) -> bool:
    if max_score_value == 0:
        return True
    return score_percentage(total_score, max_score_value) >= passing_percentage
