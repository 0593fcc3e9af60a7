"""
Chat and points operations for an authenticated session.
"""

from typing import Optional, Any, Dict
import logging

from .base import BaseAPIClient
from ..config import KlokSettings
from ..exceptions import (
    KlokError,
    APIError,
    AuthenticationError,
    ExpiredTokenError,
    RateLimitError
)
from ..models import ChatMessage, ChatRequest, ErrorPolicy, PointsResponse

logger = logging.getLogger(__name__)

RATE_LIMIT_DETAIL = "rate_limit_exceeded"


def browser_headers(settings: KlokSettings) -> Dict[str, str]:
    """Static headers that make requests look like the web app."""
    return {
        "accept": "*/*",
        "accept-encoding": "gzip, deflate, br, zstd",
        "accept-language": "en-US,en;q=0.9",
        "origin": settings.site_url,
        "referer": f"{settings.site_url}/",
        "user-agent": settings.user_agent,
    }


def _is_rate_limited(error: APIError) -> bool:
    if isinstance(error, RateLimitError) or error.status_code == 429:
        return True
    detail = error.response.get("detail") if isinstance(error.response, dict) else None
    return detail is not None and RATE_LIMIT_DETAIL in str(detail)


class ChatAPI(BaseAPIClient):
    """
    Klok API client carrying a session token.

    Failures come back as None unless they are a condition the bot loop
    must react to; which conditions propagate depends on the error policy.
    """

    def __init__(
        self,
        session_token: str,
        settings: KlokSettings,
        error_policy: Optional[ErrorPolicy] = None
    ):
        headers = browser_headers(settings)
        headers["x-session-token"] = session_token
        super().__init__(settings.api_base_url, settings, headers=headers)
        self.session_token = session_token
        self.error_policy = ErrorPolicy(error_policy or settings.error_policy)

    @property
    def propagates(self) -> bool:
        return self.error_policy == ErrorPolicy.PROPAGATE

    def build_chat_request(self, text: str) -> ChatRequest:
        """Fresh chat payload for a single user message."""
        return ChatRequest(
            title=self.settings.chat_title,
            messages=[ChatMessage(content=text)],
            model=self.settings.chat_model,
            language=self.settings.language
        )

    def send_message(self, text: str) -> Optional[Any]:
        """
        Send one chat message.

        Args:
            text: Message content

        Returns:
            Parsed response body, or None on failure

        Raises:
            RateLimitError: Daily limit reached (propagate policy only)
        """
        chat = self.build_chat_request(text)

        try:
            body = self.post("/chat", json_data=chat.model_dump(mode="json"), allow_text=True)
        except APIError as e:
            if _is_rate_limited(e):
                if self.propagates:
                    raise RateLimitError(
                        "RATE_LIMIT_EXCEEDED",
                        endpoint="/chat",
                        retry_after=getattr(e, "retry_after", None),
                        status_code=e.status_code,
                        response=e.response
                    ) from e
                logger.error(f"Rate limit reached while sending message: {e.response}")
                return None

            logger.error(f"Error sending message: {e.status_code} {e.response or e.message}")
            return None

        logger.info("Message sent successfully")
        return body

    def check_points(self) -> Optional[PointsResponse]:
        """
        Fetch the current points balance.

        Returns:
            Points snapshot, or None on failure

        Raises:
            ExpiredTokenError: Session token rejected (propagate policy only)
        """
        try:
            data = self.get("/points")
            return PointsResponse.model_validate(data)
        except AuthenticationError as e:
            if self.propagates and e.status_code == 401:
                raise ExpiredTokenError(
                    "EXPIRED_TOKEN",
                    status_code=e.status_code,
                    response=e.response
                ) from e
            return self._points_failure(e)
        except KlokError as e:
            return self._points_failure(e)
        except ValueError as e:
            # Malformed body (pydantic ValidationError is a ValueError)
            return self._points_failure(APIError(f"Unexpected points response: {e}"))

    def _points_failure(self, error: KlokError) -> None:
        if self.propagates:
            status = getattr(error, "status_code", None)
            response = getattr(error, "response", None)
            logger.error(f"Error checking points: {status} {response or error.message}")
        else:
            logger.debug(f"Points check failed: {error.message}")
        return None


def create_api_client(
    session_token: str,
    settings: KlokSettings,
    error_policy: Optional[ErrorPolicy] = None
) -> ChatAPI:
    """
    Build an API client bound to the base URL and session token.

    Args:
        session_token: Token from /verify
        settings: Client settings
        error_policy: Override for settings.error_policy

    Returns:
        Configured ChatAPI
    """
    return ChatAPI(session_token, settings, error_policy=error_policy)
