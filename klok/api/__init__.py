"""API clients for the Klok service."""

from .base import BaseAPIClient
from .chat import ChatAPI, create_api_client

__all__ = ["BaseAPIClient", "ChatAPI", "create_api_client"]
