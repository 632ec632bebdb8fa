"""
Application errors for clean API error handling.

Use ServiceUnavailableError when a dependency (LLM provider, search backend)
is misconfigured or unreachable so the API can return 503 with a user-facing message.
"""


class InvalidRequestError(Exception):
    """Raised when the client request is unusable (e.g. empty chat message)."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ServiceUnavailableError(Exception):
    """Raised when a required service (e.g. LLM provider, MCP server) is unavailable or misconfigured."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class SearchBackendError(Exception):
    """Raised when the search backend fails: error status, unreachable, or timed out."""

    def __init__(self, status_code: int | None, body: str) -> None:
        self.status_code = status_code  # None when the backend could not be reached
        self.body = body
        super().__init__(f"Search backend error {status_code}: {body[:200]}")
