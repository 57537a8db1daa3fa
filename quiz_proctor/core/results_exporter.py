"""Utilities for exporting a quiz's submissions as CSV."""

from __future__ import annotations

import csv
import io
from pathlib import Path

from quiz_proctor.core.models import Quiz, Submission, ViolationKind
from quiz_proctor.core.services.scoring import score_percentage

_SCORE_COLUMNS = (
    "totalScore",
    "maxScore",
    "passPercentage",
    "status",
    "tabSwitches",
    "totalViolations",
    "timeTaken",
    "submittedAt",
)


def render_submissions_csv(quiz: Quiz, submissions: list[Submission]) -> str:
    """Return the CSV document: one column per form field, then score columns."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
    field_names = [form_field.name for form_field in quiz.form_fields]
    writer.writerow([*field_names, *_SCORE_COLUMNS])
    for submission in submissions:
        writer.writerow(_serialize_submission(submission, field_names))
    return buffer.getvalue()


def save_submissions_csv(file_path: Path, quiz: Quiz, submissions: list[Submission]) -> None:
    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(render_submissions_csv(quiz, submissions), encoding="utf-8", newline="")


def _serialize_submission(submission: Submission, field_names: list[str]) -> list[str]:
    tab_switches = sum(
        1 for violation in submission.violations if violation.kind == ViolationKind.TAB_SWITCH.value
    )
    percentage = score_percentage(submission.total_score, submission.max_score)
    return [
        *(submission.registration.get(name, "") for name in field_names),
        _format_number(submission.total_score),
        _format_number(submission.max_score),
        f"{percentage:.2f}",
        submission.status.value,
        str(tab_switches),
        str(len(submission.violations)),
        str(submission.elapsed_seconds),
        submission.submitted_at.isoformat(),
    ]


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
