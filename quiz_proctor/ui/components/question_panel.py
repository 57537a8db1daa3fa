"""Component showing one question at a time with its answer input."""

from __future__ import annotations

from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QButtonGroup,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QRadioButton,
    QVBoxLayout,
    QWidget,
)

from quiz_proctor.constants.ui_constants import (
    NEXT_BUTTON,
    PREV_BUTTON,
    SHORT_ANSWER_PLACEHOLDER,
    SUBMIT_BUTTON,
    TIME_REMAINING_TEMPLATE,
)
from quiz_proctor.core.models import CHOICE_QUESTION_TYPES, PublicQuestion
from quiz_proctor.styling.styles import Styles
from quiz_proctor.ui.question_renderer import render_question_document


class QuestionPanel(QWidget):
    """Navigates the questions and reports every answer change."""

    def __init__(
        self,
        questions: list[PublicQuestion],
        on_answer_changed: callable,
        get_answer: callable,
        on_submit: callable,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.questions = questions
        self.on_answer_changed = on_answer_changed
        self.get_answer = get_answer
        self.on_submit = on_submit

        self._index = 0
        self._font_size: int = 14
        self._answer_group: QButtonGroup | None = None

        self._build_ui()
        self.show_question(0)

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        status_row = QHBoxLayout()
        self.timer_label = QLabel("", self)
        self.timer_label.setStyleSheet(Styles.get_timer_style(warning=False))
        status_row.addWidget(self.timer_label)
        status_row.addStretch()
        self.violation_label = QLabel("", self)
        status_row.addWidget(self.violation_label)
        layout.addLayout(status_row)

        self.banner_label = QLabel("", self)
        self.banner_label.setWordWrap(True)
        self.banner_label.setStyleSheet(Styles.get_violation_banner_style())
        self.banner_label.hide()
        layout.addWidget(self.banner_label)

        self.question_view = QWebEngineView(self)
        self.question_view.setMinimumHeight(240)
        layout.addWidget(self.question_view, stretch=1)

        self.answer_container = QWidget(self)
        self.answer_layout = QVBoxLayout(self.answer_container)
        layout.addWidget(self.answer_container)

        nav_row = QHBoxLayout()
        self.prev_button = QPushButton(PREV_BUTTON, self)
        self.prev_button.clicked.connect(lambda: self.show_question(self._index - 1))
        nav_row.addWidget(self.prev_button)
        self.progress_label = QLabel("", self)
        self.progress_label.setStyleSheet(Styles.get_secondary_text_style())
        nav_row.addWidget(self.progress_label)
        nav_row.addStretch()
        self.next_button = QPushButton(NEXT_BUTTON, self)
        self.next_button.clicked.connect(lambda: self.show_question(self._index + 1))
        nav_row.addWidget(self.next_button)
        self.submit_button = QPushButton(SUBMIT_BUTTON, self)
        self.submit_button.setDefault(True)
        self.submit_button.clicked.connect(self.on_submit)
        nav_row.addWidget(self.submit_button)
        layout.addLayout(nav_row)

    def show_question(self, index: int) -> None:
        if not self.questions:
            return
        self._index = max(0, min(index, len(self.questions) - 1))
        question = self.questions[self._index]
        total = len(self.questions)

        self.question_view.setHtml(
            render_question_document(question, self._index + 1, total, self._font_size)
        )
        self._build_answer_input(question)
        self.progress_label.setText(f"{self._index + 1} / {total}")
        self.prev_button.setEnabled(self._index > 0)
        self.next_button.setEnabled(self._index < total - 1)

    def _build_answer_input(self, question: PublicQuestion) -> None:
        while self.answer_layout.count():
            item = self.answer_layout.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()
        self._answer_group = None
        current = self.get_answer(question.id)

        if question.question_type in CHOICE_QUESTION_TYPES:
            group = QButtonGroup(self.answer_container)
            for option in question.options:
                button = QRadioButton(option, self.answer_container)
                button.setChecked(option == current)
                group.addButton(button)
                self.answer_layout.addWidget(button)
            group.buttonClicked.connect(
                lambda button, qid=question.id: self.on_answer_changed(qid, button.text())
            )
            self._answer_group = group
            return

        line_edit = QLineEdit(self.answer_container)
        line_edit.setPlaceholderText(SHORT_ANSWER_PLACEHOLDER)
        line_edit.setText(current)
        line_edit.textChanged.connect(
            lambda text, qid=question.id: self.on_answer_changed(qid, text)
        )
        self.answer_layout.addWidget(line_edit)

    def unanswered_count(self) -> int:
        return sum(1 for q in self.questions if not self.get_answer(q.id).strip())

    def update_status(self, remaining_seconds: int, warning: bool, violations_text: str) -> None:
        minutes, seconds = divmod(max(0, remaining_seconds), 60)
        self.timer_label.setText(TIME_REMAINING_TEMPLATE.format(minutes=minutes, seconds=seconds))
        self.timer_label.setStyleSheet(Styles.get_timer_style(warning=warning))
        self.violation_label.setText(violations_text)

    def show_banner(self, message: str) -> None:
        self.banner_label.setText(message)
        self.banner_label.show()

    def set_inputs_enabled(self, enabled: bool) -> None:
        self.answer_container.setEnabled(enabled)
        self.submit_button.setEnabled(enabled)
