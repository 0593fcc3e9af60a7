"""
Input validation for credentials.
"""

import re

from ..exceptions import ValidationError


def validate_private_key(private_key: str) -> str:
    """
    Validate private key format.

    Args:
        private_key: Private key hex string

    Returns:
        Normalized private key

    Raises:
        ValidationError: If private key is invalid
    """
    if not isinstance(private_key, str):
        raise ValidationError(f"Private key must be string, got {type(private_key)}")

    key = private_key.strip()
    # Remove 0x prefix if present
    key = key[2:] if key.startswith("0x") else key

    # Validate hex format and length (32 bytes = 64 hex chars)
    if not re.match(r"^[0-9a-fA-F]{64}$", key):
        raise ValidationError("Invalid private key format")

    return f"0x{key.lower()}"


def validate_session_token(token: str) -> str:
    """
    Validate a session token returned by the API.

    Raises:
        ValidationError: If the token is empty or contains whitespace
    """
    if not isinstance(token, str) or not token.strip():
        raise ValidationError("Session token must be a non-empty string")

    token = token.strip()
    if re.search(r"\s", token):
        raise ValidationError("Session token must not contain whitespace")

    return token
