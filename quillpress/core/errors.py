"""Domain error types raised by the CMS services.

Purpose:
- Give services a typed way to reject an operation without depending on the
  web framework.
- Carry the HTTP status the API layer should answer with, plus optional
  structured details.

Usage:
- Raise the narrowest subclass from services; the server registers a single
  handler for `CmsError` that turns it into a JSON response.
"""

from __future__ import annotations

from typing import Any, Optional


class CmsError(Exception):
    """Base error for rejected CMS operations.

    Args:
        message: Human-readable error description.
        status_code: HTTP status code the API answers with.
        details: Optional structured payload for the client.
    """

    def __init__(self, message: str, *, status_code: int = 400, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class NotFoundError(CmsError):
    """Raised when a referenced record does not exist (HTTP 404)."""

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message, status_code=404, details=details)


class ConflictError(CmsError):
    """Raised when a unique slug, name or email is already taken (HTTP 409)."""

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message, status_code=409, details=details)


class InvalidRequestError(CmsError):
    """Raised when the payload is well-formed but semantically invalid (HTTP 400)."""

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message, status_code=400, details=details)


class LockedTagError(CmsError):
    """Raised when a locked tag is modified or deleted (HTTP 423).

    Args:
        tag_id: Identifier of the locked tag.
        action: What was attempted, used in the message.
    """

    def __init__(self, tag_id: str, action: str = "modified") -> None:
        super().__init__(f"Tag is locked and cannot be {action}", status_code=423, details={"tag_id": tag_id})
        self.tag_id = tag_id
