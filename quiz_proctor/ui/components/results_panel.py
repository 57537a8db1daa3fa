"""Component showing the outcome of a finished attempt."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QPushButton, QVBoxLayout, QWidget

from quiz_proctor.constants.ui_constants import CLOSE_BUTTON, TERMINATED_MESSAGE
from quiz_proctor.core.models import AttemptPayload, SubmissionReceipt, SubmissionStatus
from quiz_proctor.styling.styles import Styles


class ResultsPanel(QWidget):
    """Shows score and pass/fail, or the submission error with local data."""

    def __init__(self, on_close: callable, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._build_ui(on_close)

    def _build_ui(self, on_close: callable) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)
        layout.addStretch()

        self.headline_label = QLabel("", self)
        self.headline_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.headline_label)

        self.detail_label = QLabel("", self)
        self.detail_label.setAlignment(Qt.AlignCenter)
        self.detail_label.setWordWrap(True)
        self.detail_label.setStyleSheet(Styles.get_secondary_text_style())
        layout.addWidget(self.detail_label)

        self.close_button = QPushButton(CLOSE_BUTTON, self)
        self.close_button.clicked.connect(on_close)
        layout.addWidget(self.close_button, alignment=Qt.AlignCenter)
        layout.addStretch()

    def show_outcome(
        self,
        payload: AttemptPayload,
        receipt: SubmissionReceipt | None,
        error: str | None = None,
        tab_switches: int = 0,
        fullscreen_exits: int = 0,
    ) -> None:
        lines = [
            f"Violations recorded: {len(payload.violations)} "
            f"(window switches: {tab_switches}, fullscreen exits: {fullscreen_exits})",
            f"Time taken: {payload.elapsed_seconds} s",
        ]
        if payload.status == SubmissionStatus.TERMINATED:
            lines.insert(0, TERMINATED_MESSAGE)

        if receipt is None:
            self.headline_label.setText("Submission failed")
            self.headline_label.setStyleSheet(Styles.get_result_style(passed=False))
            lines.insert(0, error or "The quiz server could not record your attempt.")
        else:
            verdict = "Passed" if receipt.passed else "Not passed"
            self.headline_label.setText(
                f"{verdict}: {receipt.total_score:g} / {receipt.max_score:g}"
            )
            self.headline_label.setStyleSheet(Styles.get_result_style(passed=receipt.passed))
        self.detail_label.setText("\n".join(lines))
