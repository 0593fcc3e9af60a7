"""
Type definitions for the Klok client.

Uses Pydantic for the request/response shapes exchanged with the API.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field, ConfigDict, field_validator


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with milliseconds and a Z suffix."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ErrorPolicy(str, Enum):
    """How chat/points operations report rate limits and expired sessions."""
    PROPAGATE = "propagate"  # Raise RateLimitError / ExpiredTokenError
    SWALLOW = "swallow"      # Log and return None


class Role(str, Enum):
    """Chat message author."""
    USER = "user"


# Authentication
class SignInMessage(BaseModel):
    """
    Plain-text wallet sign-in message.

    Rendered in the sign-in-with-Ethereum layout the service expects.
    """
    domain: str = "klokapp.ai"
    address: str = Field(..., description="Checksummed wallet address")
    uri: str = "https://klokapp.ai/"
    version: str = "1"
    chain_id: int = 1
    nonce: str = Field(..., min_length=64, max_length=64, description="32 random bytes, hex")
    issued_at: str = Field(default_factory=utc_timestamp)

    def render(self) -> str:
        """Text that gets signed."""
        return (
            f"{self.domain} wants you to sign in with your Ethereum account:\n"
            f"{self.address}\n\n\n"
            f"URI: {self.uri}\n"
            f"Version: {self.version}\n"
            f"Chain ID: {self.chain_id}\n"
            f"Nonce: {self.nonce}\n"
            f"Issued At: {self.issued_at}"
        )


class VerifyRequest(BaseModel):
    """Body of POST /verify."""
    model_config = ConfigDict(populate_by_name=True)

    signed_message: str = Field(..., alias="signedMessage")
    message: str
    referral_code: Optional[str] = None


class VerifyResponse(BaseModel):
    """Response of POST /verify."""
    model_config = ConfigDict(extra="allow")

    session_token: Optional[str] = None


# Chat
class ChatMessage(BaseModel):
    """Single chat turn."""
    model_config = ConfigDict(use_enum_values=True)

    role: Role = Role.USER
    content: str


class ChatRequest(BaseModel):
    """Body of POST /chat."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str = "Auto Chat"
    messages: list[ChatMessage]
    sources: list[Any] = Field(default_factory=list)
    model: str = "gpt-4o-mini"
    created_at: str = Field(default_factory=utc_timestamp)
    language: str = "english"

    @field_validator("messages")
    @classmethod
    def validate_messages(cls, v: list[ChatMessage]) -> list[ChatMessage]:
        """A chat request always carries at least one message."""
        if not v:
            raise ValueError("messages must not be empty")
        return v


class PointsResponse(BaseModel):
    """Response of GET /points."""
    model_config = ConfigDict(extra="allow")

    total_points: int
