"""Error taxonomy shared by the marking engine and the HTTP layer."""

from __future__ import annotations

from typing import Optional


class MarkingError(Exception):
    """Base class for failures that map onto an HTTP status."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(MarkingError):
    status_code = 400


class NotFoundError(MarkingError):
    status_code = 404


class ConfigurationError(MarkingError):
    status_code = 500


class ParseError(MarkingError):
    status_code = 500

    def __init__(self, message: str, raw_response: Optional[str] = None) -> None:
        super().__init__(message)
        self.raw_response = raw_response


class ExternalServiceError(MarkingError):
    status_code = 500


class PersistenceError(MarkingError):
    status_code = 500


class ConcurrentUpdateError(PersistenceError):
    status_code = 409


__all__ = [
    "ConcurrentUpdateError",
    "ConfigurationError",
    "ExternalServiceError",
    "MarkingError",
    "NotFoundError",
    "ParseError",
    "PersistenceError",
    "ValidationError",
]
