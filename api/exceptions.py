"""Errors raised by the backend API client."""
from typing import Any, Optional


class ApiError(Exception):
    """
    A request to the backend failed.

    Covers both transport failures (no status code) and non-2xx responses.
    `message` is safe to show to the user.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        Exception.__init__(self, message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    def __repr__(self) -> str:
        return f"ApiError({self.message!r}, status_code={self.status_code})"
