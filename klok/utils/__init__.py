"""Utility modules for the Klok client."""

from .validators import validate_private_key, validate_session_token
from .retry import RetryStrategy
from .structured_logging import CredentialRedactionFilter, StructuredFormatter

__all__ = [
    "validate_private_key",
    "validate_session_token",
    "RetryStrategy",
    "CredentialRedactionFilter",
    "StructuredFormatter",
]
