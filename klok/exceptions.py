"""
Custom exceptions for the Klok client.

Provides typed exceptions so the bot loop can tell recoverable
conditions (expired session, rate limit) apart from plain failures.
"""

from typing import Optional, Any


class KlokError(Exception):
    """Base exception for all Klok errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class CredentialError(KlokError):
    """Credential file could not be read or written."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, {"path": path})
        self.path = path


class ValidationError(KlokError):
    """Input validation failed."""
    pass


class APIError(KlokError):
    """API request failed."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 response: Optional[Any] = None):
        super().__init__(message, {"status_code": status_code, "response": response})
        self.status_code = status_code
        self.response = response


class TimeoutError(APIError):
    """Request timed out."""
    pass


class AuthenticationError(APIError):
    """Authentication failed."""
    pass


class AuthenticationExhaustedError(AuthenticationError):
    """Authentication kept failing after every retry."""

    def __init__(self, message: str, last_error: Optional[BaseException] = None):
        super().__init__(message)
        self.last_error = last_error
        self.details["last_error"] = str(last_error) if last_error else None


class ExpiredTokenError(AuthenticationError):
    """Session token was rejected by an authenticated endpoint."""
    pass


class RateLimitError(APIError):
    """Rate limit exceeded."""

    def __init__(self, message: str, endpoint: str, retry_after: Optional[float] = None,
                 status_code: Optional[int] = 429, response: Optional[Any] = None):
        super().__init__(message, status_code=status_code, response=response)
        self.endpoint = endpoint
        self.retry_after = retry_after
        self.details.update({"endpoint": endpoint, "retry_after": retry_after})
