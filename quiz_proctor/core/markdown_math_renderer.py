"""Markdown + LaTeX rendering of question text for the student client.

The server renders each question once when serving the public quiz, and
the Qt client wraps the fragment in a document that loads MathJax.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html import escape

from markdown_it import MarkdownIt

_MATHJAX_SCRIPT = "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math into HTML fragments or full documents."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        sanitized = (markdown_text or "").strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def wrap_with_mathjax(self, body_html: str, title: str = "QuizProctor", font_size: int = 14) -> str:
        """Wrap a fragment inside a minimal HTML document that loads MathJax."""

        return f"""<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>{escape(title)}</title>
    <style>
      body {{ font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; padding: 1rem; font-size: {font_size}pt; }}
      .question-html {{ line-height: 1.5; }}
    </style>
    <script>
      window.MathJax = {{ tex: {{ inlineMath: [['$','$']], displayMath: [['$$','$$']] }} }};
    </script>
    <script defer src=\"{_MATHJAX_SCRIPT}\"></script>
  </head>
  <body>
    <div class=\"question-html\">{body_html}</div>
  </body>
</html>"""


renderer = MarkdownMathRenderer()
# MarkdownIt is safe for concurrent read-only renders, so the server threads
# and the Qt client share this instance.
