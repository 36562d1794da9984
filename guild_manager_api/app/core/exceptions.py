"""
Error taxonomy for the guild backend.

Every failure the service or the record store reports is a subclass of
``GuildManagerError``.  Each class carries the HTTP status the gateway
answers with, so ``main.py`` can translate all of them with a single
exception handler into the ``{"error": ..., "details": ...}`` body.
"""

from typing import Any, Dict, Optional


class GuildManagerError(Exception):
    """Base class for all guild backend errors."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(GuildManagerError):
    """Malformed input: missing name, bad level or bad identifier."""

    status_code = 400


class ConflictError(GuildManagerError):
    """A guild with the same name already exists."""

    status_code = 409


class NotFoundError(GuildManagerError):
    """No guild matches the requested identifier."""

    status_code = 404


class StoreError(GuildManagerError):
    """The underlying sqlite database failed."""

    status_code = 500
