"""
Klok Chat Bot

Wallet-authenticated client for the Klok chat API that spends daily
points by sending scheduled chat messages.
"""

from .bot import ChatBot, BotSession, BotState, TickTimer
from .api import ChatAPI, create_api_client
from .auth import Authenticator, CredentialStore
from .config import KlokSettings, get_settings
from .models import (
    ErrorPolicy,
    SignInMessage,
    VerifyRequest,
    VerifyResponse,
    ChatMessage,
    ChatRequest,
    PointsResponse,
)
from .exceptions import (
    KlokError,
    CredentialError,
    ValidationError,
    APIError,
    TimeoutError,
    AuthenticationError,
    AuthenticationExhaustedError,
    ExpiredTokenError,
    RateLimitError,
)

__version__ = "1.0.0"

__all__ = [
    # Bot
    "ChatBot",
    "BotSession",
    "BotState",
    "TickTimer",

    # Clients
    "ChatAPI",
    "create_api_client",
    "Authenticator",
    "CredentialStore",

    # Config
    "KlokSettings",
    "get_settings",

    # Types
    "ErrorPolicy",
    "SignInMessage",
    "VerifyRequest",
    "VerifyResponse",
    "ChatMessage",
    "ChatRequest",
    "PointsResponse",

    # Exceptions
    "KlokError",
    "CredentialError",
    "ValidationError",
    "APIError",
    "TimeoutError",
    "AuthenticationError",
    "AuthenticationExhaustedError",
    "ExpiredTokenError",
    "RateLimitError",
]
