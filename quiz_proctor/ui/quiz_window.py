"""Main window of the student client running one proctored attempt."""

from __future__ import annotations

import logging

from PySide6.QtCore import QSettings, Qt
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QLabel,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from quiz_proctor.client.api_client import ApiError, ProctorApiClient
from quiz_proctor.constants.about import APP_NAME
from quiz_proctor.constants.quiz_constants import TIME_WARNING_WINDOW_SECONDS
from quiz_proctor.constants.ui_constants import (
    FULLSCREEN_EXIT_MESSAGE,
    FULLSCREEN_UNAVAILABLE_MESSAGE,
    RULES_TEXT,
    START_BUTTON,
    TAB_SWITCH_MESSAGE,
    VIOLATION_COUNTER_TEMPLATE,
    WINDOW_TITLE,
)
from quiz_proctor.core.models import AttemptPayload, PublicQuiz, SubmissionReceipt, ViolationKind
from quiz_proctor.core.services.proctored_session import ProctoredSession, SessionState
from quiz_proctor.styling.styles import Styles
from quiz_proctor.ui.components.question_panel import QuestionPanel
from quiz_proctor.ui.components.results_panel import ResultsPanel
from quiz_proctor.ui.dialog_helpers import confirm_submit, show_info
from quiz_proctor.ui.proctor_bindings import QtSessionEnvironment

logger = logging.getLogger(__name__)


def _attempt_settings() -> QSettings:
    return QSettings(APP_NAME, APP_NAME)


def was_attempted_locally(link_token: str) -> bool:
    """Advisory marker only; the server decides whether an attempt is accepted."""
    return bool(_attempt_settings().value(f"attempted/{link_token}", False, type=bool))


def mark_attempted_locally(link_token: str) -> None:
    _attempt_settings().setValue(f"attempted/{link_token}", True)


class StudentQuizWindow(QMainWindow):
    """Rules page, then the questions, then the outcome."""

    def __init__(
        self,
        quiz: PublicQuiz,
        registration: dict[str, str],
        client: ProctorApiClient,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle(f"{WINDOW_TITLE}: {quiz.title}")
        self.quiz = quiz
        self.client = client
        self._seen_violations = 0

        self.environment = QtSessionEnvironment(self)
        self.session = ProctoredSession(
            quiz,
            registration,
            self.environment,
            submit_handler=self._submit_attempt,
            violation_reporter=lambda violation: client.report_violation(quiz.link_token, violation),
        )
        self.environment.ticked.connect(self._refresh_status)
        self.environment.violation_detected.connect(self._handle_violation)

        self._build_ui()
        self.setStyleSheet(Styles.get_main_window_style())

    def _build_ui(self) -> None:
        self.page_stack = QStackedWidget(self)
        self.setCentralWidget(self.page_stack)

        self.intro_page = self._build_intro_page()
        self.question_panel = QuestionPanel(
            self.quiz.questions,
            on_answer_changed=self.session.set_answer,
            get_answer=self.session.get_answer,
            on_submit=self._handle_submit_clicked,
            parent=self,
        )
        self.results_panel = ResultsPanel(on_close=self.close, parent=self)

        self.page_stack.addWidget(self.intro_page)
        self.page_stack.addWidget(self.question_panel)
        self.page_stack.addWidget(self.results_panel)
        self.page_stack.setCurrentWidget(self.intro_page)

    def _build_intro_page(self) -> QWidget:
        page = QWidget(self)
        layout = QVBoxLayout(page)
        layout.addStretch()

        title_label = QLabel(self.quiz.title, page)
        title_label.setAlignment(Qt.AlignCenter)
        title_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(title_label)

        if self.quiz.description:
            description_label = QLabel(self.quiz.description, page)
            description_label.setWordWrap(True)
            description_label.setAlignment(Qt.AlignCenter)
            layout.addWidget(description_label)

        minutes = self.quiz.settings.time_limit_minutes
        rules = RULES_TEXT.format(max_violations=self.quiz.settings.max_violations)
        rules_label = QLabel(f"Time limit: {minutes} minute(s).\n\n{rules}", page)
        rules_label.setWordWrap(True)
        rules_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(rules_label)

        start_button = QPushButton(START_BUTTON, page)
        start_button.setDefault(True)
        start_button.clicked.connect(self._start_session)
        layout.addWidget(start_button, alignment=Qt.AlignCenter)
        layout.addStretch()
        return page

    # --- Session wiring ---

    def _start_session(self) -> None:
        self.page_stack.setCurrentWidget(self.question_panel)
        self.session.start()
        self._refresh_status()
        if not self.session.fullscreen_obtained:
            show_info(self, WINDOW_TITLE, FULLSCREEN_UNAVAILABLE_MESSAGE)

    def _handle_submit_clicked(self) -> None:
        if self.session.state is not SessionState.ACTIVE:
            return
        if not confirm_submit(self, self.question_panel.unanswered_count()):
            return
        self.session.submit()

    def _refresh_status(self) -> None:
        remaining = self.session.clock.remaining_seconds
        self.question_panel.update_status(
            remaining,
            warning=remaining <= TIME_WARNING_WINDOW_SECONDS,
            violations_text=VIOLATION_COUNTER_TEMPLATE.format(
                count=self.session.tracker.count,
                max_violations=self.session.tracker.max_violations,
            ),
        )

    def _handle_violation(self, kind: str) -> None:
        count = self.session.tracker.count
        if count == self._seen_violations:
            return
        self._seen_violations = count
        if self.session.state is SessionState.ACTIVE:
            message = TAB_SWITCH_MESSAGE if kind == ViolationKind.TAB_SWITCH.value else FULLSCREEN_EXIT_MESSAGE
            self.question_panel.show_banner(message)
            self._refresh_status()

    def _submit_attempt(self, payload: AttemptPayload) -> SubmissionReceipt | None:
        self.question_panel.set_inputs_enabled(False)
        try:
            receipt = self.client.submit_attempt(self.quiz.link_token, payload)
        except ApiError as exc:
            logger.error("Submitting attempt for %s failed: %s", self.quiz.link_token, exc.message)
            self._show_outcome(payload, None, exc.message)
            return None
        mark_attempted_locally(self.quiz.link_token)
        self._show_outcome(payload, receipt)
        return receipt

    def _show_outcome(
        self,
        payload: AttemptPayload,
        receipt: SubmissionReceipt | None,
        error: str | None = None,
    ) -> None:
        tracker = self.session.tracker
        self.results_panel.show_outcome(
            payload,
            receipt,
            error,
            tab_switches=tracker.count_of(ViolationKind.TAB_SWITCH),
            fullscreen_exits=tracker.count_of(ViolationKind.FULLSCREEN_EXIT),
        )
        self.page_stack.setCurrentWidget(self.results_panel)
        self.showNormal()

    def closeEvent(self, event: QCloseEvent) -> None:
        self.session.close()
        super().closeEvent(event)
