"""Domain errors shared by services and routes.

Each error carries the HTTP status the API answers with, so route handlers
can translate them without a lookup table.
"""

from typing import Optional


class StorefrontError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(StorefrontError):
    """A required field is missing or empty."""

    status_code = 400

    def __init__(self, message: str, fields: Optional[list] = None):
        super().__init__(message)
        self.fields = fields or []


class ContentNotFound(StorefrontError):
    status_code = 404


class Unauthorized(StorefrontError):
    """Missing, invalid, expired or non-admin session."""

    status_code = 401


class StorageError(StorefrontError):
    """The database or the object store failed. Message is safe to show."""

    status_code = 500


class ConfigError(RuntimeError):
    """Invalid or missing configuration; raised at startup."""
