from __future__ import annotations

from datetime import datetime

import pytest

from quiz_proctor.core.models import FieldType, QuestionType
from quiz_proctor.core.quiz_importer import QuizImportError, load_quiz_from_file, parse_quiz_text

SAMPLE = """\
TITLE: Physics check
DESCRIPTION: Units and vectors
TIMELIMIT: 15
MAXVIOLATIONS: 2
PASSING: 50
OPENS: 2026-05-01T09:00
FIELD: Name | text | required
FIELD: Email | email | required
FIELD: Section | dropdown | optional | A, B

---

Q: What is the SI unit of force?
A: Joule
B: Newton
CORRECT: B
MARKS: 2
PENALTY: 1

---

Q: Speed is a vector.
TYPE: truefalse
CORRECT: False

---

Q: Symbol for
   acceleration?
TYPE: short
CORRECT: a
"""


def test_parse_full_definition():
    draft = parse_quiz_text(SAMPLE)

    assert draft.title == "Physics check"
    assert draft.settings.time_limit_minutes == 15
    assert draft.settings.max_violations == 2
    assert draft.settings.passing_percentage == 50
    assert draft.settings.opens_at == datetime(2026, 5, 1, 9, 0)
    assert [f.field_type for f in draft.form_fields] == [
        FieldType.TEXT,
        FieldType.EMAIL,
        FieldType.DROPDOWN,
    ]
    assert draft.form_fields[2].options == ["A", "B"]
    assert not draft.form_fields[2].required

    mcq, true_false, short = draft.questions
    assert mcq.options == ["Joule", "Newton"]
    assert mcq.correct_answer == "Newton"
    assert (mcq.positive_marks, mcq.negative_marks) == (2, 1)
    assert true_false.question_type is QuestionType.TRUE_FALSE
    assert true_false.correct_answer == "false"
    assert short.text == "Symbol for\nacceleration?"


def test_defaults_apply_when_optional_keys_are_missing():
    draft = parse_quiz_text("TITLE: T\nTIMELIMIT: 5\n---\nQ: One?\nA: x\nB: y\nCORRECT: A\n")
    assert draft.settings.max_violations == 3
    assert draft.settings.passing_percentage == 40
    assert draft.questions[0].positive_marks == 1
    assert draft.questions[0].negative_marks == 0


@pytest.mark.parametrize(
    "text",
    [
        "",
        "TITLE: T\nTIMELIMIT: 5\n",
        "TIMELIMIT: 5\n---\nQ: One?\nA: x\nB: y\nCORRECT: A\n",
        "TITLE: T\n---\nQ: One?\nA: x\nB: y\nCORRECT: A\n",
        "TITLE: T\nTIMELIMIT: 0\n---\nQ: One?\nA: x\nB: y\nCORRECT: A\n",
        "TITLE: T\nTIMELIMIT: 5\n---\nQ: One?\nA: x\nCORRECT: A\n",
        "TITLE: T\nTIMELIMIT: 5\n---\nQ: One?\nA: x\nB: y\nCORRECT: Z\n",
        "TITLE: T\nTIMELIMIT: 5\n---\nQ: One?\nTYPE: essay\nCORRECT: A\n",
        "TITLE: T\nTIMELIMIT: 5\nCOLOR: blue\n---\nQ: One?\nA: x\nB: y\nCORRECT: A\n",
        "TITLE: T\nTIMELIMIT: 5\nFIELD: Age | date\n---\nQ: One?\nA: x\nB: y\nCORRECT: A\n",
    ],
)
def test_malformed_definitions_raise(text):
    with pytest.raises(QuizImportError):
        parse_quiz_text(text)


def test_load_from_file(tmp_path):
    path = tmp_path / "quiz.txt"
    path.write_text(SAMPLE, encoding="utf-8")

    imported = load_quiz_from_file(path)
    assert imported.source_path == path
    assert len(imported.draft.questions) == 3
