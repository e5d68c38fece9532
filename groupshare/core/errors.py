"""
Domain error taxonomy.

Every error raised by the service layer carries a machine-readable ``kind``
and the HTTP status it maps to, so routes stay thin: the exception handler in
``groupshare.main`` renders any ``GroupShareError`` as a standard
``ErrorResponse``.
"""
from typing import Optional


class GroupShareError(Exception):
    """Base class for all domain errors."""

    kind = "GroupShareError"
    status_code = 500

    def __init__(self, message: str, *, details: Optional[list] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(GroupShareError):
    """Group, or the device's check-in in a group, does not exist."""

    kind = "NotFound"
    status_code = 404


class ValidationError(GroupShareError, ValueError):
    """Missing required field or malformed value.

    Also a ``ValueError`` so pydantic field validators can raise it directly.
    """

    kind = "ValidationError"
    status_code = 400


class CodeGenerationExhausted(GroupShareError):
    """Every generated join code collided with an existing group."""

    kind = "CodeGenerationExhausted"
    status_code = 503


class StorageError(GroupShareError):
    """Transaction or connection failure in the store."""

    kind = "StorageError"
    status_code = 500
