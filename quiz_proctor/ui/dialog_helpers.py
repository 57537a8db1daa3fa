"""Helper functions for common dialog patterns in the student client."""

from __future__ import annotations

from PySide6.QtWidgets import QMessageBox, QWidget


def confirm_submit(parent: QWidget | None, unanswered: int) -> bool:
    """Ask the student to confirm submitting the quiz.

    Args:
        parent: Parent widget for the dialog
        unanswered: Number of questions still without an answer

    Returns:
        True if the student confirmed, False otherwise
    """
    message = "Submit your answers now? You cannot change them afterwards."
    if unanswered:
        message = f"{unanswered} question(s) are unanswered. " + message
    reply = QMessageBox.question(
        parent,
        "Confirm Submit",
        message,
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No
    )
    return reply == QMessageBox.Yes


def show_error(parent: QWidget | None, title: str, message: str) -> None:
    QMessageBox.critical(parent, title, message)


def show_info(parent: QWidget | None, title: str, message: str) -> None:
    QMessageBox.information(parent, title, message)


def show_warning(parent: QWidget | None, title: str, message: str) -> None:
    QMessageBox.warning(parent, title, message)
