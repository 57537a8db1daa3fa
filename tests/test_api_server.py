from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
import pytest

from quiz_proctor.core.proctor_manager import ProctorManager
from quiz_proctor.server.api_server import create_api_app

TEACHER = {"X-Teacher-Id": "teacher-1"}

DRAFT = {
    "title": "API quiz",
    "form_fields": [
        {"name": "Name", "field_type": "text", "required": True},
        {"name": "Email", "field_type": "email", "required": True},
    ],
    "questions": [
        {
            "id": "q1",
            "text": "Pick A",
            "question_type": "mcq",
            "options": ["A", "B"],
            "correct_answer": "A",
            "positive_marks": 1,
            "negative_marks": 0,
        },
        {
            "id": "q2",
            "text": "The sky is blue.",
            "question_type": "truefalse",
            "correct_answer": "true",
            "positive_marks": 2,
            "negative_marks": 1,
        },
    ],
    "settings": {"time_limit_minutes": 5, "max_violations": 3, "passing_percentage": 40},
}


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_api_app(ProctorManager()))


def _published(client: TestClient, draft: dict | None = None) -> dict:
    created = client.post("/api/quizzes", json=draft or DRAFT, headers=TEACHER)
    assert created.status_code == 201
    published = client.post(f"/api/quizzes/{created.json()['id']}/publish", headers=TEACHER)
    assert published.status_code == 200
    return published.json()


def _submission(email: str = "ada@example.com") -> dict:
    return {
        "registration": {"Name": "Ada", "Email": email},
        "answers": [
            {"question_id": "q1", "selected_answer": "A"},
            {"question_id": "q2", "selected_answer": "false"},
        ],
        "status": "completed",
        "elapsed_seconds": 30,
        "violations": [{"kind": "tab_switch", "timestamp": "2026-03-01T12:00:00Z"}],
    }


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_public_quiz_never_exposes_correct_answers(client):
    quiz = _published(client)
    response = client.get(f"/api/quiz/{quiz['link_token']}")

    assert response.status_code == 200
    assert "correct_answer" not in response.text
    assert [q["id"] for q in response.json()["questions"]] == ["q1", "q2"]


def test_unknown_or_unpublished_link_is_404(client):
    created = client.post("/api/quizzes", json=DRAFT, headers=TEACHER).json()
    assert client.get(f"/api/quiz/{created['link_token']}").status_code == 404
    assert client.get("/api/quiz/nope").status_code == 404


def test_submit_scores_and_rejects_duplicates(client):
    link = _published(client)["link_token"]
    response = client.post(f"/api/quiz/{link}/submit", json=_submission())

    assert response.status_code == 201
    body = response.json()
    assert body["total_score"] == 0
    assert body["max_score"] == 3
    assert body["pass"] is False
    assert body["status"] == "completed"

    duplicate = client.post(f"/api/quiz/{link}/submit", json=_submission("ADA@example.com"))
    assert duplicate.status_code == 409


def test_closed_window_is_403_with_reason(client):
    past = datetime.now(timezone.utc) - timedelta(days=1)
    draft = {
        **DRAFT,
        "settings": {
            **DRAFT["settings"],
            "opens_at": (past - timedelta(hours=1)).isoformat(),
            "closes_at": past.isoformat(),
        },
    }
    link = _published(client, draft)["link_token"]

    response = client.post(f"/api/quiz/{link}/submit", json=_submission())
    assert response.status_code == 403
    assert response.json()["detail"]["reason"] == "already_closed"


def test_invalid_registration_is_422(client):
    link = _published(client)["link_token"]
    payload = _submission()
    del payload["registration"]["Name"]
    assert client.post(f"/api/quiz/{link}/submit", json=payload).status_code == 422


def test_log_violation(client):
    link = _published(client)["link_token"]
    response = client.post(f"/api/quiz/{link}/log-violation", json={"kind": "fullscreen_exit"})
    assert response.status_code == 200
    assert response.json()["kind"] == "fullscreen_exit"


def test_teacher_routes_need_identity(client):
    assert client.get("/api/quizzes").status_code == 401
    assert client.post("/api/quizzes", json=DRAFT).status_code == 401


def test_teacher_lifecycle_and_csv_export(client):
    quiz = _published(client)
    quiz_id = quiz["id"]

    assert client.put(f"/api/quizzes/{quiz_id}", json=DRAFT, headers=TEACHER).status_code == 403
    assert client.delete(f"/api/quizzes/{quiz_id}", headers=TEACHER).status_code == 403
    republished = client.put(
        f"/api/quizzes/{quiz_id}/republish", json={**DRAFT, "title": "Renamed"}, headers=TEACHER
    )
    assert republished.json()["title"] == "Renamed"

    client.post(f"/api/quiz/{quiz['link_token']}/submit", json=_submission())
    submissions = client.get(f"/api/quizzes/{quiz_id}/submissions", headers=TEACHER).json()
    assert len(submissions) == 1
    assert submissions[0]["registration"]["Email"] == "ada@example.com"

    export = client.get(f"/api/quizzes/{quiz_id}/submissions/csv", headers=TEACHER)
    assert export.status_code == 200
    assert export.headers["content-type"].startswith("text/csv")
    assert export.text.splitlines()[0].startswith("Name,Email,totalScore")

    other = {"X-Teacher-Id": "teacher-2"}
    assert client.get(f"/api/quizzes/{quiz_id}", headers=other).status_code == 404
    assert client.get("/api/quizzes", headers=other).json() == []


def test_invalid_draft_is_422(client):
    draft = {**DRAFT, "questions": []}
    assert client.post("/api/quizzes", json=draft, headers=TEACHER).status_code == 422


def test_numeric_registration_values_are_stored_as_text(client):
    draft = {
        **DRAFT,
        "form_fields": [*DRAFT["form_fields"], {"name": "Age", "field_type": "number", "required": True}],
    }
    quiz = _published(client, draft)
    body = _submission()
    body["registration"]["Age"] = 21

    response = client.post(f"/api/quiz/{quiz['link_token']}/submit", json=body)
    assert response.status_code == 201

    submissions = client.get(f"/api/quizzes/{quiz['id']}/submissions", headers=TEACHER).json()
    assert submissions[0]["registration"]["Age"] == "21"


def test_attempts_without_email_are_not_deduplicated(client):
    draft = {**DRAFT, "form_fields": [{"name": "Name", "field_type": "text", "required": True}]}
    quiz = _published(client, draft)
    body = _submission()
    body["registration"] = {"Name": "Ada"}

    first = client.post(f"/api/quiz/{quiz['link_token']}/submit", json=body)
    second = client.post(f"/api/quiz/{quiz['link_token']}/submit", json=body)

    assert (first.status_code, second.status_code) == (201, 201)
    submissions = client.get(f"/api/quizzes/{quiz['id']}/submissions", headers=TEACHER).json()
    assert len(submissions) == 2


def test_plain_email_key_is_used_for_deduplication(client):
    draft = {**DRAFT, "form_fields": [{"name": "Name", "field_type": "text", "required": True}]}
    quiz = _published(client, draft)
    body = _submission()
    body["registration"] = {"Name": "Ada", "email": "Ada@Example.com"}
    repeat = _submission()
    repeat["registration"] = {"Name": "Ada L.", "email": " ada@example.com "}

    assert client.post(f"/api/quiz/{quiz['link_token']}/submit", json=body).status_code == 201
    assert client.post(f"/api/quiz/{quiz['link_token']}/submit", json=repeat).status_code == 409
