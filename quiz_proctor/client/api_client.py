"""HTTP client used by the student application."""

from __future__ import annotations

import logging
from threading import Thread

import httpx

from quiz_proctor.constants.network_constants import DEFAULT_REQUEST_TIMEOUT_SECONDS
from quiz_proctor.core.models import AttemptPayload, PublicQuiz, SubmissionReceipt, Violation
from quiz_proctor.server.schemas import PublicQuizSchema, ReceiptSchema, SubmitPayload

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx response or transport failure. ``status_code`` is 0 for the latter."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, dict):
        detail = detail.get("message")
    if isinstance(detail, str) and detail:
        return detail
    return f"Request failed with status {response.status_code}"


class ProctorApiClient:
    """Talks to the student routes of the proctoring server."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ProctorApiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def fetch_quiz(self, link_token: str) -> PublicQuiz:
        data = self._request("GET", f"/api/quiz/{link_token}")
        return PublicQuizSchema.model_validate(data).to_domain()

    def submit_attempt(self, link_token: str, payload: AttemptPayload) -> SubmissionReceipt:
        body = SubmitPayload.from_domain(payload).model_dump(mode="json")
        data = self._request("POST", f"/api/quiz/{link_token}/submit", json=body)
        return ReceiptSchema.model_validate(data).to_domain()

    def report_violation(self, link_token: str, violation: Violation) -> Thread:
        """Fire-and-forget violation report on a daemon thread."""
        thread = Thread(
            target=self._send_violation,
            args=(link_token, violation),
            name="ViolationReporter",
            daemon=True,
        )
        thread.start()
        return thread

    def _send_violation(self, link_token: str, violation: Violation) -> None:
        try:
            self._request(
                "POST",
                f"/api/quiz/{link_token}/log-violation",
                json={"kind": violation.kind},
            )
        except ApiError as exc:
            logger.warning("Violation report for %s failed: %s", link_token, exc.message)
        except RuntimeError as exc:  # client closed while the report was queued
            logger.warning("Violation report for %s dropped: %s", link_token, exc)

    def _request(self, method: str, path: str, **kwargs) -> dict:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise ApiError(0, f"Could not reach the quiz server: {exc}") from exc
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        return response.json()
