"""Append-only submission storage with a (quiz, email) uniqueness index."""

from __future__ import annotations

from threading import Lock

from quiz_proctor.core.errors import ConflictError
from quiz_proctor.core.models import Submission


def normalize_email(email: str | None) -> str | None:
    if email is None:
        return None
    cleaned = email.strip().casefold()
    return cleaned or None


class SubmissionStore:
    """Stores submissions. Insertion and the duplicate check are one atomic step."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._submissions: list[Submission] = []
        self._attempt_keys: set[tuple[str, str]] = set()

    def insert(self, submission: Submission, email: str | None = None) -> Submission:
        """Persist ``submission``; raise ``ConflictError`` if the email already attempted."""
        key_email = normalize_email(email)
        with self._lock:
            if key_email is not None:
                key = (submission.quiz_id, key_email)
                if key in self._attempt_keys:
                    raise ConflictError("You have already attempted this quiz.")
                self._attempt_keys.add(key)
            self._submissions.append(submission)
        return submission

    def has_attempt(self, quiz_id: str, email: str | None) -> bool:
        key_email = normalize_email(email)
        if key_email is None:
            return False
        with self._lock:
            return (quiz_id, key_email) in self._attempt_keys

    def list_for_quiz(self, quiz_id: str) -> list[Submission]:
        with self._lock:
            matching = [s for s in self._submissions if s.quiz_id == quiz_id]
        return sorted(matching, key=lambda s: s.submitted_at, reverse=True)
