"""Static metadata describing QuizProctor."""

APP_NAME = "QuizProctor"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "QuizProctor runs timed, proctored quizzes. Teachers publish quizzes over HTTP "
    "and students take them in a fullscreen desktop client that reports tab switches "
    "and fullscreen exits."
)

HELP_TEXT = (
    "Quizzes can be authored through the HTTP API or seeded from a .txt definition file:\n\n"
    "TITLE: Radians\nTIMELIMIT: 10\nMAXVIOLATIONS: 3\nPASSING: 40\n"
    "FIELD: email | email | required\n\n---\n\n"
    "Q: What is $30^o$ in radians?\nTYPE: mcq\n"
    "A: \\frac{\\pi}{2}\nB: \\frac{\\pi}{6}\n"
    "CORRECT: B\nMARKS: 2\nPENALTY: 1"
)
