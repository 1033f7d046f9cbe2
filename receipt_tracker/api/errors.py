"""Errors raised by the API client."""

from __future__ import annotations


class ApiError(Exception):
    """The backend answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str | None = None) -> None:
        self.status_code = status_code
        self.message = message or f"API Error: {status_code}"
        super().__init__(self.message)
