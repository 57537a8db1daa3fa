from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
import threading

import httpx
import pytest

from quiz_proctor.client.api_client import ApiError, ProctorApiClient
from quiz_proctor.core.models import (
    AttemptPayload,
    QuestionType,
    SubmissionStatus,
    SubmittedAnswer,
    Violation,
)

PUBLIC_QUIZ = {
    "title": "Remote",
    "description": "",
    "link_token": "abc123",
    "form_fields": [{"name": "Email", "field_type": "email", "required": True, "options": []}],
    "questions": [
        {
            "id": "q1",
            "text": "Pick",
            "text_html": "<p>Pick</p>",
            "question_type": "mcq",
            "options": ["A", "B"],
            "positive_marks": 1,
            "negative_marks": 0,
        }
    ],
    "settings": {"time_limit_minutes": 5, "max_violations": 2, "passing_percentage": 40},
}


def _client(handler) -> ProctorApiClient:
    return ProctorApiClient("http://quiz.test/", transport=httpx.MockTransport(handler))


def test_fetch_quiz_parses_public_quiz():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/quiz/abc123"
        return httpx.Response(200, json=PUBLIC_QUIZ)

    with _client(handler) as client:
        quiz = client.fetch_quiz("abc123")

    assert quiz.settings.max_violations == 2
    assert quiz.questions[0].question_type is QuestionType.MCQ


def test_submit_sends_payload_and_reads_receipt():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(json.loads(request.content))
        return httpx.Response(
            201,
            json={
                "submission_id": "s1",
                "total_score": 1,
                "max_score": 1,
                "pass": True,
                "status": "terminated",
            },
        )

    payload = AttemptPayload(
        registration={"Email": "ada@example.com"},
        answers=[SubmittedAnswer("q1", "A")],
        status=SubmissionStatus.TERMINATED,
        elapsed_seconds=12,
        violations=[Violation("tab_switch", datetime(2026, 3, 1, tzinfo=timezone.utc))],
    )
    with _client(handler) as client:
        receipt = client.submit_attempt("abc123", payload)

    assert receipt.passed
    assert receipt.status is SubmissionStatus.TERMINATED
    assert seen["status"] == "terminated"
    assert seen["violations"][0]["kind"] == "tab_switch"
    assert seen["answers"] == [{"question_id": "q1", "selected_answer": "A"}]


@pytest.mark.parametrize(
    ("status", "detail", "message"),
    [
        (409, "You have already attempted this quiz.", "You have already attempted this quiz."),
        (403, {"message": "Quiz has ended", "reason": "already_closed"}, "Quiz has ended"),
        (500, None, "Request failed with status 500"),
    ],
)
def test_error_responses_raise_api_error(status, detail, message):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"detail": detail})

    with _client(handler) as client, pytest.raises(ApiError) as error:
        client.fetch_quiz("abc123")

    assert error.value.status_code == status
    assert error.value.message == message


def test_transport_failure_is_status_zero():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with _client(handler) as client, pytest.raises(ApiError) as error:
        client.fetch_quiz("abc123")
    assert error.value.status_code == 0


def test_violation_report_failure_is_swallowed():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        return httpx.Response(404, json={"detail": "Quiz not found"})

    with _client(handler) as client:
        thread = client.report_violation("abc123", Violation("tab_switch", datetime.now(timezone.utc)))
        thread.join(timeout=5)

    assert not thread.is_alive()
    assert calls == ["/api/quiz/abc123/log-violation"]


def test_violation_report_after_close_is_logged(monkeypatch, caplog):
    uncaught = []
    monkeypatch.setattr(threading, "excepthook", uncaught.append)

    client = _client(lambda request: httpx.Response(200, json={"ok": True}))
    client.close()
    with caplog.at_level(logging.WARNING, logger="quiz_proctor.client.api_client"):
        thread = client.report_violation("abc123", Violation("tab_switch", datetime.now(timezone.utc)))
        thread.join(timeout=5)

    assert not thread.is_alive()
    assert uncaught == []
    assert "dropped" in caplog.text
