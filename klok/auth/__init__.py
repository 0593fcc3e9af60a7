"""Authentication modules for the Klok client."""

from .authenticator import Authenticator
from .credential_store import CredentialStore

__all__ = ["Authenticator", "CredentialStore"]
