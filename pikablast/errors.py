"""
Error taxonomy for the scoring service.

Each error carries the HTTP status and the client-facing message
the API layer renders as ``{"error": message}``.
"""

from __future__ import annotations

from typing import Any


class BlastError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidCategory(BlastError):
    """A caller supplied an intensity outside the fixed set."""

    status_code = 400
    message = "Invalid intensity level"

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__()


class InternalFault(BlastError):
    """Unexpected failure while serving a request."""

    status_code = 500
