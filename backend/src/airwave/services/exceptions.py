"""Service error hierarchy for record store and job provider operations.

This module defines the exception hierarchy for service-level errors:
- ServiceError: Base for all service errors
- BadRequest: Missing required input from the caller (400)
- StoreError / ProviderError: Remote call failures (500, never retried)
"""

from typing import Optional


class ServiceError(Exception):
    """Base exception for all service errors."""

    pass


class BadRequest(ServiceError):
    """Caller omitted required input."""

    pass


class RemoteError(ServiceError):
    """Non-success response (or transport failure) from a remote API.

    Attributes:
        status_code: HTTP status of the response, None for transport failures
        body: Response body text for diagnostics
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


# Record store errors
class StoreError(RemoteError):
    """Base exception for record store errors."""

    pass


class StoreUnavailable(StoreError):
    """Record store returned a non-success response or could not be reached."""

    pass


class StoreNotFound(StoreUnavailable):
    """Record identifier did not resolve (404)."""

    pass


# Job provider errors
class ProviderError(RemoteError):
    """Base exception for job provider errors."""

    pass


class ProviderUnavailable(ProviderError):
    """Job provider returned a non-success response or could not be reached."""

    pass
