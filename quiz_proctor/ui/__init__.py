"""Qt UI components for the proctored student client."""

from .dialog_helpers import confirm_submit, show_error, show_info, show_warning
from .proctor_bindings import QtSessionEnvironment
from .question_renderer import render_question_document
from .quiz_window import StudentQuizWindow
from .registration_dialog import RegistrationDialog

__all__ = [
    "QtSessionEnvironment",
    "RegistrationDialog",
    "StudentQuizWindow",
    "confirm_submit",
    "render_question_document",
    "show_error",
    "show_info",
    "show_warning",
]
