"""
Configuration management for the Klok bot.

Defaults are the bot's built-in constants; every value can be
overridden through KLOK_ environment variables or a .env file.
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import ErrorPolicy


DEFAULT_MESSAGES = [
    "Hey there!",
    "What's new?",
    "How's it going?",
    "Tell me something interesting",
    "What do you think about AI?",
    "Have you heard the latest news?",
    "What's your favorite topic?",
    "Let's discuss something fun",
]

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/133.0.0.0 Safari/537.36 Edg/133.0.0.0"
)


class KlokSettings(BaseSettings):
    """
    Klok bot settings.

    Loads from environment variables with KLOK_ prefix.
    """
    model_config = SettingsConfigDict(
        env_prefix="KLOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # API
    api_base_url: str = Field(
        default="https://api1-pp.klokapp.ai/v1",
        description="Klok API base URL"
    )
    site_url: str = Field(
        default="https://klokapp.ai",
        description="Origin the browser headers claim to come from"
    )
    chain_id: int = Field(default=1, description="Chain ID in the sign-in message")

    # Credential files
    token_file: str = Field(default="token.txt", description="Cached session token")
    private_key_file: str = Field(default="private-key.txt", description="Wallet private key")

    # Schedule (seconds)
    chat_interval: float = Field(default=60.0, gt=0, description="Delay between ticks")
    max_retries: int = Field(default=5, ge=0, le=50, description="Max retry attempts")
    retry_delay: float = Field(default=10.0, ge=0, description="Fixed delay between retries")
    rate_limit_delay: float = Field(default=86400.0, ge=0,
                                    description="Pause after the daily limit is hit")

    # Timeouts
    request_timeout: float = Field(default=30.0, ge=1.0, description="Request timeout (seconds)")
    connect_timeout: float = Field(default=10.0, ge=1.0, description="Connection timeout (seconds)")

    # Chat payload
    chat_model: str = Field(default="gpt-4o-mini", description="Model requested for chats")
    chat_title: str = Field(default="Auto Chat", description="Conversation title")
    language: str = Field(default="english", description="Conversation language")
    messages: list[str] = Field(default_factory=lambda: list(DEFAULT_MESSAGES), min_length=1,
                                description="Canned messages picked at random")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="Browser user agent")

    # Error handling
    error_policy: ErrorPolicy = Field(
        default=ErrorPolicy.PROPAGATE,
        description="Raise or swallow rate-limit / expired-token conditions"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[str] = Field(None, description="Optional rotating log file")
    log_json: bool = Field(default=False, description="Emit JSON log lines")
    log_requests: bool = Field(default=False, description="Log all HTTP requests")

    def __repr__(self) -> str:
        """Safe repr without credential locations."""
        return (
            f"KlokSettings("
            f"api_base_url={self.api_base_url}, "
            f"chat_interval={self.chat_interval}, "
            f"error_policy={self.error_policy.value}"
            ")"
        )


def get_settings() -> KlokSettings:
    """
    Get Klok settings.

    Returns:
        Validated settings instance
    """
    return KlokSettings()
