"""Quiz-related constants shared across core, server and client layers."""

DEFAULT_MAX_VIOLATIONS: int = 3
DEFAULT_PASSING_PERCENTAGE: float = 40.0
DEFAULT_POSITIVE_MARKS: float = 1.0
DEFAULT_NEGATIVE_MARKS: float = 0.0
LINK_TOKEN_LENGTH: int = 10
CLOCK_TICK_INTERVAL_MS: int = 1000
TIME_WARNING_WINDOW_SECONDS: int = 60
TRUE_FALSE_VALUES: tuple[str, str] = ("true", "false")
