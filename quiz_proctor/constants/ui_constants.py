"""Qt UI constants used by the student client."""

WINDOW_TITLE: str = "QuizProctor"
REGISTRATION_TITLE: str = "Registration"
RULES_TEXT: str = (
    "When you click Start, the quiz enters fullscreen mode. Switching windows or "
    "leaving fullscreen counts as a violation. Exceeding {max_violations} violation(s) "
    "terminates the quiz."
)

START_BUTTON: str = "Start Quiz"
SUBMIT_BUTTON: str = "Submit Quiz"
PREV_BUTTON: str = "Previous"
NEXT_BUTTON: str = "Next"
CLOSE_BUTTON: str = "Close"

SHORT_ANSWER_PLACEHOLDER: str = "Type your answer"
CHOICE_PLACEHOLDER: str = "Select..."

TAB_SWITCH_MESSAGE: str = "Window focus lost. This counts as a violation."
FULLSCREEN_EXIT_MESSAGE: str = "Fullscreen exited. This counts as a violation."
TERMINATED_MESSAGE: str = "Your quiz was terminated for exceeding the allowed number of violations."
ALREADY_ATTEMPTED_MESSAGE: str = "This quiz has already been attempted from this computer."
VIOLATION_COUNTER_TEMPLATE: str = "Violations: {count} / {max_violations}"
TIME_REMAINING_TEMPLATE: str = "{minutes:02d}:{seconds:02d} remaining"
FULLSCREEN_UNAVAILABLE_MESSAGE: str = (
    "Fullscreen could not be enabled. The quiz continues; switching windows still counts as a violation."
)
