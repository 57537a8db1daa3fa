"""FastAPI server exposing student attempt endpoints and teacher quiz management."""

from __future__ import annotations

import logging
from typing import NoReturn

from fastapi import Depends, FastAPI, Header, HTTPException, Response
import uvicorn

from quiz_proctor.constants.about import APP_NAME, APP_VERSION
from quiz_proctor.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT, TEACHER_ID_HEADER
from quiz_proctor.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    QuizProctorError,
    QuizValidationError,
)
from quiz_proctor.core.proctor_manager import ProctorManager
from quiz_proctor.server.schemas import (
    PublicQuizSchema,
    QuizDraftSchema,
    QuizSchema,
    ReceiptSchema,
    SubmissionSchema,
    SubmitPayload,
    ViolationReport,
)

logger = logging.getLogger(__name__)


def _raise_http(exc: QuizProctorError) -> NoReturn:
    if isinstance(exc, NotFoundError):
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if isinstance(exc, ForbiddenError):
        raise HTTPException(
            status_code=403, detail={"message": str(exc), "reason": exc.reason}
        ) from exc
    if isinstance(exc, ConflictError):
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    if isinstance(exc, QuizValidationError):
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    raise HTTPException(status_code=500, detail="Server error") from exc


def _get_manager_dependency(manager: ProctorManager):
    def dependency() -> ProctorManager:
        return manager

    return dependency


def _require_teacher(x_teacher_id: str | None = Header(default=None, alias=TEACHER_ID_HEADER)) -> str:
    """Owner identity supplied by the authentication layer in front of this API."""
    if not x_teacher_id or not x_teacher_id.strip():
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_teacher_id.strip()


def create_api_app(manager: ProctorManager) -> FastAPI:
    """Create a FastAPI application wired to the provided manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    manager_dep = _get_manager_dependency(manager)

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    # --- Student routes ---

    @app.get("/api/quiz/{link_token}", response_model=PublicQuizSchema)
    def get_quiz_by_link(
        link_token: str,
        proctor: ProctorManager = Depends(manager_dep),
    ) -> PublicQuizSchema:
        try:
            quiz = proctor.get_public_quiz(link_token)
        except QuizProctorError as exc:
            _raise_http(exc)
        return PublicQuizSchema.from_domain(quiz)

    @app.post("/api/quiz/{link_token}/submit", status_code=201, response_model=ReceiptSchema)
    def submit_attempt(
        link_token: str,
        payload: SubmitPayload,
        proctor: ProctorManager = Depends(manager_dep),
    ) -> ReceiptSchema:
        try:
            receipt = proctor.submit_attempt(link_token, payload.to_domain())
        except QuizProctorError as exc:
            _raise_http(exc)
        return ReceiptSchema.from_domain(receipt)

    @app.post("/api/quiz/{link_token}/log-violation")
    def log_violation(
        link_token: str,
        report: ViolationReport,
        proctor: ProctorManager = Depends(manager_dep),
    ) -> dict[str, str]:
        try:
            kind = proctor.log_violation(link_token, report.kind)
        except QuizProctorError as exc:
            _raise_http(exc)
        return {"message": "Violation logged", "kind": kind}

    # --- Teacher routes ---

    @app.post("/api/quizzes", status_code=201, response_model=QuizSchema)
    def create_quiz(
        draft: QuizDraftSchema,
        owner_id: str = Depends(_require_teacher),
        proctor: ProctorManager = Depends(manager_dep),
    ) -> QuizSchema:
        try:
            quiz = proctor.create_quiz(owner_id, draft.to_domain())
        except QuizProctorError as exc:
            _raise_http(exc)
        return QuizSchema.from_domain(quiz)

    @app.get("/api/quizzes", response_model=list[QuizSchema])
    def list_quizzes(
        owner_id: str = Depends(_require_teacher),
        proctor: ProctorManager = Depends(manager_dep),
    ) -> list[QuizSchema]:
        return [QuizSchema.from_domain(quiz) for quiz in proctor.list_quizzes(owner_id)]

    @app.get("/api/quizzes/{quiz_id}", response_model=QuizSchema)
    def get_quiz(
        quiz_id: str,
        owner_id: str = Depends(_require_teacher),
        proctor: ProctorManager = Depends(manager_dep),
    ) -> QuizSchema:
        try:
            quiz = proctor.get_quiz(owner_id, quiz_id)
        except QuizProctorError as exc:
            _raise_http(exc)
        return QuizSchema.from_domain(quiz)

    @app.put("/api/quizzes/{quiz_id}", response_model=QuizSchema)
    def update_quiz(
        quiz_id: str,
        draft: QuizDraftSchema,
        owner_id: str = Depends(_require_teacher),
        proctor: ProctorManager = Depends(manager_dep),
    ) -> QuizSchema:
        try:
            quiz = proctor.update_quiz(owner_id, quiz_id, draft.to_domain())
        except QuizProctorError as exc:
            _raise_http(exc)
        return QuizSchema.from_domain(quiz)

    @app.delete("/api/quizzes/{quiz_id}")
    def delete_quiz(
        quiz_id: str,
        owner_id: str = Depends(_require_teacher),
        proctor: ProctorManager = Depends(manager_dep),
    ) -> dict[str, str]:
        try:
            proctor.delete_quiz(owner_id, quiz_id)
        except QuizProctorError as exc:
            _raise_http(exc)
        return {"message": "Quiz deleted"}

    @app.post("/api/quizzes/{quiz_id}/publish", response_model=QuizSchema)
    def publish_quiz(
        quiz_id: str,
        owner_id: str = Depends(_require_teacher),
        proctor: ProctorManager = Depends(manager_dep),
    ) -> QuizSchema:
        try:
            quiz = proctor.publish_quiz(owner_id, quiz_id)
        except QuizProctorError as exc:
            _raise_http(exc)
        return QuizSchema.from_domain(quiz)

    @app.put("/api/quizzes/{quiz_id}/republish", response_model=QuizSchema)
    def republish_quiz(
        quiz_id: str,
        draft: QuizDraftSchema,
        owner_id: str = Depends(_require_teacher),
        proctor: ProctorManager = Depends(manager_dep),
    ) -> QuizSchema:
        try:
            quiz = proctor.republish_quiz(owner_id, quiz_id, draft.to_domain())
        except QuizProctorError as exc:
            _raise_http(exc)
        return QuizSchema.from_domain(quiz)

    @app.get("/api/quizzes/{quiz_id}/submissions", response_model=list[SubmissionSchema])
    def list_submissions(
        quiz_id: str,
        owner_id: str = Depends(_require_teacher),
        proctor: ProctorManager = Depends(manager_dep),
    ) -> list[SubmissionSchema]:
        try:
            submissions = proctor.list_submissions(owner_id, quiz_id)
        except QuizProctorError as exc:
            _raise_http(exc)
        return [SubmissionSchema.from_domain(s) for s in submissions]

    @app.get("/api/quizzes/{quiz_id}/submissions/csv")
    def export_submissions_csv(
        quiz_id: str,
        owner_id: str = Depends(_require_teacher),
        proctor: ProctorManager = Depends(manager_dep),
    ) -> Response:
        try:
            document = proctor.export_submissions_csv(owner_id, quiz_id)
        except QuizProctorError as exc:
            _raise_http(exc)
        return Response(
            content=document,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="quiz-{quiz_id}-submissions.csv"'},
        )

    return app


def run_api_server(
    manager: ProctorManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    log_level: str = "info",
) -> None:
    """Run the API server in the foreground until interrupted."""
    app = create_api_app(manager)
    logger.info("API server listening on %s:%s", host, port)
    uvicorn.run(app, host=host, port=port, log_level=log_level.lower())

