"""
Geocoding exceptions

This module defines the exception hierarchy for the geocoding clients.
All geocoding errors inherit from GeocodeError, so callers can catch that to
handle any failed request generically. A request either returns a complete
result or raises exactly one of these.
"""

from typing import Optional


class GeocodeError(Exception):
    """
    Base exception for all geocoding errors.

    Args:
        message: Human readable description, usually the service's own text
        originalError: The exception that caused this error (optional)
    """

    def __init__(self, message: str, originalError: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.originalError = originalError


class ParseError(GeocodeError):
    """
    Raised when a response cannot be understood.

    Covers malformed JSON, missing structural nodes and service error codes
    without a more specific meaning.
    """

    pass


class NotSupportedError(GeocodeError):
    """Raised when the service rejects the query, language or country as unsupported."""

    pass


class NoMatchesError(GeocodeError):
    """Raised when a well-formed response holds zero results."""

    pass


class InvalidArgumentsError(GeocodeError):
    """
    Raised when the caller supplied contradictory or insufficient input.

    Examples: coordinates out of range, latitude given together with
    address parameters, a malformed geo URI, an invalid IP address.
    """

    pass


class InternalServiceError(GeocodeError):
    """Raised for service side failures, e.g. its backing database is unavailable."""

    pass


class GeocodeNetworkError(GeocodeError):
    """
    Raised when the HTTP exchange itself fails.

    Args:
        message: Description of the transport failure
        originalError: The httpx exception, if any
        statusCode: HTTP status of the failed response, if any
    """

    def __init__(
        self, message: str, originalError: Optional[Exception] = None, statusCode: Optional[int] = None
    ):
        super().__init__(message, originalError=originalError)
        self.statusCode = statusCode


class GeocodeCancelledError(GeocodeError):
    """Raised when a request was cancelled before it completed."""

    pass
