"""State machine governing one proctored attempt on the client.

Lifecycle: ``NOT_STARTED -> ACTIVE -> COMPLETED | TERMINATED``. The session
owns its clock and violation tracker, subscribes to the environment's two
boundary signals (focus lost, fullscreen lost) only while active, and hands
the attempt to the submit handler exactly once.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
import logging
from typing import Any, Protocol

from quiz_proctor.core.models import (
    AttemptPayload,
    PublicQuiz,
    SubmissionStatus,
    SubmittedAnswer,
    ViolationKind,
)
from quiz_proctor.core.services.session_clock import SessionClock
from quiz_proctor.core.services.violation_tracker import ViolationReporter, ViolationTracker

logger = logging.getLogger(__name__)

Unsubscribe = Callable[[], None]


class SessionState(Enum):
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    COMPLETED = "completed"
    TERMINATED = "terminated"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.TERMINATED)


class SessionEnvironment(Protocol):
    """Boundary the session runs in (a Qt window in the student client)."""

    def request_fullscreen(self) -> bool:
        """Try to enter fullscreen; return whether it was obtained."""

    def subscribe(
        self,
        on_focus_lost: Callable[[], None],
        on_fullscreen_lost: Callable[[], None],
        on_fullscreen_entered: Callable[[], None],
    ) -> Unsubscribe:
        """Connect the boundary signals and return a callable that disconnects them."""

    def start_ticker(self, on_tick: Callable[[], None]) -> Unsubscribe:
        """Start a one-second ticker and return a callable that stops it."""


class ProctoredSession:
    """One attempt: one clock, one tracker, one set of subscriptions."""

    def __init__(
        self,
        quiz: PublicQuiz,
        registration: dict[str, str],
        environment: SessionEnvironment,
        submit_handler: Callable[[AttemptPayload], Any],
        violation_reporter: ViolationReporter | None = None,
    ) -> None:
        self._quiz = quiz
        self._registration = dict(registration)
        self._environment = environment
        self._submit_handler = submit_handler
        self._clock = SessionClock(quiz.settings.time_limit_seconds)
        self._tracker = ViolationTracker(quiz.settings.max_violations, reporter=violation_reporter)
        self._answers: dict[str, str] = {}
        self._state = SessionState.NOT_STARTED
        self._fullscreen_obtained = False
        self._submitting = False
        self._releases: list[Unsubscribe] = []
        self._payload: AttemptPayload | None = None
        self._result: Any = None

    # --- Introspection ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def clock(self) -> SessionClock:
        return self._clock

    @property
    def tracker(self) -> ViolationTracker:
        return self._tracker

    @property
    def payload(self) -> AttemptPayload | None:
        """The attempt handed to the submit handler, once terminal."""
        return self._payload

    @property
    def result(self) -> Any:
        """Whatever the submit handler returned."""
        return self._result

    @property
    def fullscreen_obtained(self) -> bool:
        return self._fullscreen_obtained

    def get_answer(self, question_id: str) -> str:
        return self._answers.get(question_id, "")

    # --- Transitions ---

    def start(self) -> None:
        if self._state is not SessionState.NOT_STARTED:
            raise RuntimeError(f"Cannot start a session in state {self._state.value}.")
        try:
            self._fullscreen_obtained = bool(self._environment.request_fullscreen())
        except Exception:
            logger.warning("Fullscreen request failed; starting without it", exc_info=True)
            self._fullscreen_obtained = False
        self._state = SessionState.ACTIVE
        self._clock.start()
        self._releases.append(
            self._environment.subscribe(
                self.on_focus_lost,
                self.on_fullscreen_lost,
                self.on_fullscreen_entered,
            )
        )
        self._releases.append(self._environment.start_ticker(self.tick))
        logger.info(
            "Session started for quiz %s (fullscreen=%s, limit=%ss)",
            self._quiz.link_token,
            self._fullscreen_obtained,
            self._clock.limit_seconds,
        )

    def set_answer(self, question_id: str, value: str) -> bool:
        """Store a selection; ignored unless the session is active."""
        if not self._is_live():
            return False
        self._answers[question_id] = value
        return True

    def on_focus_lost(self) -> None:
        if not self._is_live():
            return
        self._tracker.record(ViolationKind.TAB_SWITCH)
        self.evaluate()

    def on_fullscreen_lost(self) -> None:
        if not self._is_live() or not self._fullscreen_obtained:
            return
        self._tracker.record(ViolationKind.FULLSCREEN_EXIT)
        self.evaluate()

    def on_fullscreen_entered(self) -> None:
        if self._state is SessionState.ACTIVE:
            self._fullscreen_obtained = True

    def tick(self, seconds: int = 1) -> None:
        if not self._is_live():
            return
        self._clock.tick(seconds)
        self.evaluate()

    def submit(self) -> AttemptPayload | None:
        """Explicit submit by the student."""
        if not self._is_live():
            return None
        return self._finish(SessionState.COMPLETED)

    def evaluate(self) -> AttemptPayload | None:
        """Check terminal triggers. Exceeding the cap wins over clock expiry."""
        if not self._is_live():
            return None
        if self._tracker.is_over_limit():
            return self._finish(SessionState.TERMINATED)
        if self._clock.is_expired():
            return self._finish(SessionState.COMPLETED)
        return None

    def close(self) -> None:
        """Tear down subscriptions and the ticker without submitting.

        A closed session ignores every later answer, signal and submit.
        """
        if self._state is SessionState.ACTIVE:
            self._submitting = True
            self._clock.freeze()
        self._release()

    def _is_live(self) -> bool:
        return self._state is SessionState.ACTIVE and not self._submitting

    def _finish(self, terminal: SessionState) -> AttemptPayload | None:
        if self._submitting:
            return None
        self._submitting = True
        self._clock.freeze()
        self._release()
        self._state = terminal
        status = (
            SubmissionStatus.TERMINATED
            if terminal is SessionState.TERMINATED
            else SubmissionStatus.COMPLETED
        )
        self._payload = AttemptPayload(
            registration=dict(self._registration),
            answers=[
                SubmittedAnswer(question_id=q.id, selected_answer=self._answers.get(q.id, ""))
                for q in self._quiz.questions
            ],
            status=status,
            elapsed_seconds=self._clock.elapsed_seconds,
            violations=self._tracker.get_violations(),
        )
        logger.info(
            "Session for quiz %s reached %s after %ss with %d violation(s)",
            self._quiz.link_token,
            terminal.value,
            self._payload.elapsed_seconds,
            self._tracker.count,
        )
        self._result = self._submit_handler(self._payload)
        return self._payload

    def _release(self) -> None:
        releases, self._releases = self._releases, []
        for release in releases:
            release()
