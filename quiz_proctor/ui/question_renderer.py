"""Question rendering utilities for displaying quiz questions."""

from __future__ import annotations

from quiz_proctor.core.markdown_math_renderer import renderer
from quiz_proctor.core.models import PublicQuestion, QuestionType


def render_question_document(question: PublicQuestion, number: int, total: int, font_size: int = 14) -> str:
    """Render a question with its marks line as an HTML document for QWebEngineView.

    Options are shown by the answer widgets, not in the document.
    """
    marks = f"+{question.positive_marks:g}"
    if question.negative_marks:
        marks += f" / -{abs(question.negative_marks):g}"
    kind = {
        QuestionType.MCQ: "Multiple choice",
        QuestionType.TRUE_FALSE: "True / False",
        QuestionType.SHORT: "Short answer",
    }[question.question_type]
    header = f"<p><strong>Question {number} of {total}</strong> &middot; {kind} &middot; {marks} marks</p>"
    body = question.text_html or renderer.render_fragment(question.text)
    return renderer.wrap_with_mathjax(header + body, font_size=font_size)
