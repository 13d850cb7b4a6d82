from __future__ import annotations


class TaskRelayHTTPError(RuntimeError):
    """Base error for shared HTTP client operations."""


class TaskRelayHTTPStatusError(TaskRelayHTTPError):
    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class TaskRelayHTTPNetworkError(TaskRelayHTTPError):
    """Raised when the transport fails before a response arrives."""
