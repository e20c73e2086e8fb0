# src/contentlynk/core/errors.py
"""Domain exceptions shared by services and the HTTP layer.

Services raise these instead of ``HTTPException`` so they can be used
outside a request. The application installs a handler that maps each
class onto its status code and the ``{"error": ...}`` response shape.
"""

from __future__ import annotations


class ContentlynkError(RuntimeError):
    """Base exception for expected application failures."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnauthorizedError(ContentlynkError):
    """Raised when no valid session is present."""

    status_code = 401


class ForbiddenError(ContentlynkError):
    """Raised when the caller is authenticated but lacks privilege."""

    status_code = 403


class NotFoundError(ContentlynkError):
    """Raised when a referenced entity does not exist."""

    status_code = 404


class InvalidRequestError(ContentlynkError):
    """Raised for malformed input or a duplicate action."""

    status_code = 400


class RateLimitedError(ContentlynkError):
    """Raised when an action exceeds its allowed frequency.

    ``retry_after`` is the number of seconds until the caller may retry,
    when known.
    """

    status_code = 429

    def __init__(self, message: str, retry_after: int | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class ServiceUnavailableError(ContentlynkError):
    """Raised when a required external integration is not configured."""

    status_code = 500
