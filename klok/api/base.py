"""
Base HTTP client with typed error handling.

Wraps a requests session with timeouts, fast JSON parsing (orjson)
and status-code to exception mapping.
"""

import orjson
import requests
from requests.adapters import HTTPAdapter
from typing import Optional, Any, Dict
import logging

from ..config import KlokSettings
from ..exceptions import (
    APIError,
    TimeoutError,
    RateLimitError,
    AuthenticationError
)

logger = logging.getLogger(__name__)


class BaseAPIClient:
    """
    Base HTTP client bound to one API base URL.

    Retries are left to callers; every call is a single request.
    """

    def __init__(
        self,
        base_url: str,
        settings: KlokSettings,
        headers: Optional[Dict[str, str]] = None
    ):
        """
        Initialize base API client.

        Args:
            base_url: API base URL
            settings: Client settings
            headers: Headers sent with every request
        """
        self.base_url = base_url.rstrip("/")
        self.settings = settings

        self.session = requests.Session()

        # We handle retries ourselves
        adapter = HTTPAdapter(max_retries=0)
        self.session.mount('https://', adapter)
        self.session.mount('http://', adapter)

        if headers:
            self.session.headers.update(headers)

        self.timeout = (settings.connect_timeout, settings.request_timeout)

        self._request_counter = 0

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    @staticmethod
    def _parse_error_body(response: requests.Response) -> Any:
        try:
            return orjson.loads(response.content)
        except (ValueError, TypeError, orjson.JSONDecodeError) as e:
            logger.debug(f"Could not parse error response as JSON: {e}")
            return response.text[:200] or None

    def _make_request(
        self,
        method: str,
        path: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
        allow_text: bool = False
    ) -> Any:
        """
        Make HTTP request with error handling.

        Args:
            method: HTTP method
            path: Request path
            headers: Additional headers
            params: Query parameters
            json_data: JSON body
            allow_text: Return the raw body when it is not JSON

        Returns:
            Response JSON (or text when allow_text is set)

        Raises:
            AuthenticationError: On 401/403
            RateLimitError: On 429
            APIError: On other HTTP errors and connection failures
            TimeoutError: On timeout
        """
        url = self._url(path)

        self._request_counter += 1
        request_id = f"{method}:{path}:{self._request_counter}"

        if self.settings.log_requests:
            logger.debug(f"[{request_id}] {method} {url} params={params}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                headers=headers,
                params=params,
                json=json_data,
                timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"Request timeout: {method} {url}")
            raise TimeoutError(f"Request timeout: {e}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Connection error: {method} {url}")
            raise APIError(f"Connection error: {e}") from e

        if response.status_code >= 400:
            error_data = self._parse_error_body(response)
            error_msg = f"{method} {path} failed with {response.status_code}: {error_data}"

            if response.status_code in (401, 403):
                raise AuthenticationError(
                    error_msg,
                    status_code=response.status_code,
                    response=error_data
                )
            elif response.status_code == 429:
                retry_after = response.headers.get("Retry-After")
                try:
                    retry_after_seconds = float(retry_after) if retry_after else None
                except ValueError:
                    retry_after_seconds = None
                raise RateLimitError(
                    error_msg,
                    endpoint=path,
                    retry_after=retry_after_seconds,
                    response=error_data
                )
            else:
                raise APIError(
                    error_msg,
                    status_code=response.status_code,
                    response=error_data
                )

        if not response.content:
            return {}

        try:
            return orjson.loads(response.content)
        except (ValueError, orjson.JSONDecodeError) as e:
            if allow_text:
                return response.text
            logger.error(f"Invalid JSON response: {response.text[:200]}")
            raise APIError(f"Invalid JSON response: {e}", status_code=response.status_code)

    def get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Any:
        """
        Make GET request.

        Args:
            path: Request path
            params: Query parameters
            headers: Additional headers

        Returns:
            Response JSON
        """
        return self._make_request("GET", path, headers=headers, params=params)

    def post(
        self,
        path: str,
        json_data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        allow_text: bool = False
    ) -> Any:
        """
        Make POST request.

        Args:
            path: Request path
            json_data: JSON body
            headers: Additional headers
            allow_text: Return the raw body when it is not JSON

        Returns:
            Response JSON
        """
        return self._make_request(
            "POST",
            path,
            headers=headers,
            json_data=json_data,
            allow_text=allow_text
        )

    def close(self) -> None:
        """Close session and cleanup resources."""
        self.session.close()
        logger.debug("API client session closed")
