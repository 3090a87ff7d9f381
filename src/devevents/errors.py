"""
Business error hierarchy.

These are domain failures, not HTTP responses; the API blueprints map them to
status codes. Not-found is never an exception here: lookups return None, [] or 0.
"""
from __future__ import annotations

from typing import Optional


class DevEventsError(Exception):
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def __str__(self) -> str:
        return self.message


class InvalidInput(DevEventsError):
    """Client input rejected before any I/O. HTTP 400."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, code: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message, code)
        self.field = field


class PersistenceError(DevEventsError):
    """A database write failed. HTTP 500."""

    code = "PERSISTENCE_ERROR"


class DuplicateEvent(PersistenceError):
    """Slug already taken. HTTP 409."""

    code = "DUPLICATE_SLUG"


class MediaUploadError(DevEventsError):
    code = "MEDIA_UPLOAD_FAILED"


class Unauthorized(DevEventsError):
    code = "UNAUTHORIZED"
