"""Utilities for importing quizzes from a human-friendly text file.

File format: a header block, then question blocks separated by '---'.

    TITLE: Quiz title
    DESCRIPTION: Optional description
    TIMELIMIT: minutes
    MAXVIOLATIONS: 3          (optional, default 3)
    PASSING: 40               (optional, percentage)
    OPENS: 2026-01-01T09:00   (optional, ISO timestamp, UTC if no offset)
    CLOSES: 2026-01-01T10:00  (optional)
    FIELD: name | type | required | option 1, option 2   (repeatable)

    ---

    Q: Question text (supports markdown + LaTeX). Following lines until
       the next marker belong to the question.
    TYPE: mcq | truefalse | short   (optional, default mcq)
    A: First option
    B: Second option
    CORRECT: B                (letter for mcq, true/false, or literal text)
    MARKS: 2                  (optional, default 1)
    PENALTY: 1                (optional, default 0)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
import string

from quiz_proctor.constants.quiz_constants import (
    DEFAULT_MAX_VIOLATIONS,
    DEFAULT_NEGATIVE_MARKS,
    DEFAULT_PASSING_PERCENTAGE,
    DEFAULT_POSITIVE_MARKS,
)
from quiz_proctor.core.models import (
    FieldType,
    FormField,
    Question,
    QuestionType,
    QuizDraft,
    QuizSettings,
)


class QuizImportError(Exception):
    """Raised when a quiz definition cannot be parsed."""


@dataclass(slots=True)
class ImportedQuiz:
    """Container for the parsed draft and where it came from."""

    source_path: Path
    draft: QuizDraft


_OPTION_LETTERS = string.ascii_uppercase


def load_quiz_from_file(file_path: Path | str) -> ImportedQuiz:
    file_path = Path(file_path)
    text = file_path.read_text(encoding="utf-8")
    return ImportedQuiz(source_path=file_path, draft=parse_quiz_text(text))


def parse_quiz_text(text: str) -> QuizDraft:
    blocks = _split_blocks(text)
    if not blocks:
        raise QuizImportError("Quiz file is empty.")
    header, *question_blocks = blocks
    questions = [_parse_question_block(block, position) for position, block in enumerate(question_blocks, 1)]
    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")
    return _parse_header(header, questions)


def _split_blocks(text: str) -> list[str]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        if raw_line.strip() == "---":
            blocks.append("\n".join(current_block).strip())
            current_block = []
            continue
        current_block.append(raw_line)
    blocks.append("\n".join(current_block).strip())
    # leading header must be kept even when empty so it is not mistaken for a question
    return [blocks[0], *(block for block in blocks[1:] if block)] if any(blocks) else []


def _split_marker(line: str) -> tuple[str, str] | None:
    if ":" not in line:
        return None
    key, value = line.split(":", 1)
    key = key.strip().upper()
    if not key or not key.isalpha():
        return None
    return key, value.strip()


def _parse_header(block: str, questions: list[Question]) -> QuizDraft:
    values: dict[str, str] = {}
    fields: list[FormField] = []
    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        marker = _split_marker(line)
        if marker is None:
            raise QuizImportError(f"Encountered text outside of a known header key: '{line}'.")
        key, value = marker
        if key == "FIELD":
            fields.append(_parse_field(value))
        elif key in {"TITLE", "DESCRIPTION", "TIMELIMIT", "MAXVIOLATIONS", "PASSING", "OPENS", "CLOSES"}:
            values[key] = value
        else:
            raise QuizImportError(f"Unknown header key '{key}'.")

    title = values.get("TITLE", "")
    if not title:
        raise QuizImportError("TITLE is required.")
    if "TIMELIMIT" not in values:
        raise QuizImportError("TIMELIMIT is required.")

    settings = QuizSettings(
        time_limit_minutes=_parse_int(values["TIMELIMIT"], "TIMELIMIT", minimum=1),
        max_violations=_parse_int(
            values.get("MAXVIOLATIONS", str(DEFAULT_MAX_VIOLATIONS)), "MAXVIOLATIONS", minimum=0
        ),
        passing_percentage=_parse_float(
            values.get("PASSING", str(DEFAULT_PASSING_PERCENTAGE)), "PASSING"
        ),
        opens_at=_parse_timestamp(values.get("OPENS"), "OPENS"),
        closes_at=_parse_timestamp(values.get("CLOSES"), "CLOSES"),
    )
    return QuizDraft(
        title=title,
        description=values.get("DESCRIPTION", ""),
        form_fields=fields,
        questions=questions,
        settings=settings,
    )


def _parse_field(value: str) -> FormField:
    parts = [part.strip() for part in value.split("|")]
    name = parts[0] if parts else ""
    if not name:
        raise QuizImportError("FIELD needs a name.")
    raw_type = (parts[1] if len(parts) > 1 and parts[1] else FieldType.TEXT.value).lower()
    try:
        field_type = FieldType(raw_type)
    except ValueError as exc:
        raise QuizImportError(f"Unknown field type '{raw_type}' for '{name}'.") from exc
    required = len(parts) > 2 and parts[2].lower() in {"required", "yes", "true"}
    options = [opt.strip() for opt in parts[3].split(",") if opt.strip()] if len(parts) > 3 else []
    return FormField(name=name, field_type=field_type, required=required, options=options)


def _parse_question_block(block: str, position: int) -> Question:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    question_type = QuestionType.MCQ
    correct: str | None = None
    positive = DEFAULT_POSITIVE_MARKS
    negative = DEFAULT_NEGATIVE_MARKS
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        marker = _split_marker(line)
        key, value = marker if marker else ("", "")

        if key == "Q":
            question_lines = [value]
            current_section = "Q"
        elif key == "TYPE":
            try:
                question_type = QuestionType(value.lower())
            except ValueError as exc:
                raise QuizImportError(f"Question {position}: unknown TYPE '{value}'.") from exc
            current_section = None
        elif key == "CORRECT":
            correct = value
            current_section = None
        elif key == "MARKS":
            positive = _parse_float(value, "MARKS")
            current_section = None
        elif key == "PENALTY":
            negative = abs(_parse_float(value, "PENALTY"))
            current_section = None
        elif len(key) == 1 and key in _OPTION_LETTERS:
            options[key] = value
            current_section = key
        elif current_section == "Q":
            question_lines.append(line)
        elif current_section in options:
            options[current_section] = f"{options[current_section]}\n{line}"
        else:
            raise QuizImportError(
                f"Question {position}: text outside of a known section: '{line}'."
            )

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuizImportError(f"Question {position}: text missing (Q: ...).")
    if correct is None or not correct.strip():
        raise QuizImportError(f"Question {position}: CORRECT is required.")

    option_list: list[str] = []
    correct_answer = correct.strip()
    if question_type == QuestionType.MCQ:
        letters = sorted(options)
        option_list = [options[letter].strip() for letter in letters]
        if len(option_list) < 2:
            raise QuizImportError(f"Question {position}: multiple choice needs at least two options.")
        letter = correct_answer.upper()
        if letter in options:
            correct_answer = options[letter].strip()
        elif correct_answer not in option_list:
            raise QuizImportError(f"Question {position}: CORRECT must name one of the options.")
    elif question_type == QuestionType.TRUE_FALSE:
        correct_answer = correct_answer.lower()
    elif options:
        raise QuizImportError(f"Question {position}: short answer questions take no options.")

    return Question(
        id="",  # assigned by the repository
        text=question_text,
        question_type=question_type,
        options=option_list,
        correct_answer=correct_answer,
        positive_marks=positive,
        negative_marks=negative,
    )


def _parse_int(raw_value: str, key: str, minimum: int) -> int:
    try:
        parsed = int(raw_value)
    except ValueError as exc:
        raise QuizImportError(f"{key} must be an integer.") from exc
    if parsed < minimum:
        raise QuizImportError(f"{key} must be at least {minimum}.")
    return parsed


def _parse_float(raw_value: str, key: str) -> float:
    try:
        return float(raw_value)
    except ValueError as exc:
        raise QuizImportError(f"{key} must be a number.") from exc


def _parse_timestamp(raw_value: str | None, key: str) -> datetime | None:
    if not raw_value:
        return None
    try:
        return datetime.fromisoformat(raw_value)
    except ValueError as exc:
        raise QuizImportError(f"{key} must be an ISO timestamp.") from exc
