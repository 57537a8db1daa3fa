from __future__ import annotations

import logging

from app_main import _build_parser, _export_results
from quiz_proctor.core.models import AttemptPayload, SubmissionStatus, SubmittedAnswer

OWNER = "teacher-1"


def test_serve_accepts_export_dir():
    args = _build_parser().parse_args(["serve", "--quiz", "a.txt", "--export-dir", "out"])
    assert args.quiz == ["a.txt"]
    assert args.export_dir == "out"


def test_export_results_writes_one_csv_per_quiz(manager, published_quiz, tmp_path):
    manager.submit_attempt(
        published_quiz.link_token,
        AttemptPayload(
            registration={"Name": "Ada", "Email": "ada@example.com"},
            answers=[SubmittedAnswer("q1", "4")],
            status=SubmissionStatus.COMPLETED,
            elapsed_seconds=30,
        ),
    )

    written = _export_results(
        manager, OWNER, [published_quiz.id], tmp_path / "results", logging.getLogger("test")
    )

    expected = tmp_path / "results" / f"{published_quiz.link_token}-submissions.csv"
    assert written == [expected]
    lines = expected.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("Name,Email,totalScore")
    assert lines[1].startswith("Ada,ada@example.com,")
