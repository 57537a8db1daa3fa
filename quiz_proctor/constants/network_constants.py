"""Network configuration constants for the proctoring server and client."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
DEFAULT_SERVER_URL: str = "http://127.0.0.1:8000"
DEFAULT_REQUEST_TIMEOUT_SECONDS: float = 10.0
TEACHER_ID_HEADER: str = "X-Teacher-Id"
