"""
Wallet sign-in for the Klok API.

Signs a sign-in-with-Ethereum style message with the wallet key
(EIP-191 personal_sign) and exchanges the signature for a session token.
"""

import secrets
import time
from typing import Callable, Optional
import logging

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_utils import to_hex

from .credential_store import CredentialStore
from ..api.base import BaseAPIClient
from ..config import KlokSettings
from ..exceptions import AuthenticationError, AuthenticationExhaustedError
from ..models import SignInMessage, VerifyRequest, VerifyResponse
from ..utils.retry import RetryStrategy
from ..utils.validators import validate_private_key, validate_session_token

logger = logging.getLogger(__name__)


class Authenticator:
    """
    Obtains session tokens by proving control of a wallet.

    Every attempt uses a fresh nonce and timestamp; failed attempts are
    retried after a constant delay.
    """

    def __init__(
        self,
        private_key: str,
        store: CredentialStore,
        settings: KlokSettings,
        client: Optional[BaseAPIClient] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize authenticator.

        Args:
            private_key: Wallet private key (hex)
            store: Where obtained tokens are persisted
            settings: Client settings
            client: HTTP client for /verify (built from settings if None)
            sleep: Blocking sleep used between retries

        Raises:
            AuthenticationError: If the key cannot be loaded into an account
        """
        try:
            self._account = Account.from_key(validate_private_key(private_key))
        except Exception as e:
            # SECURITY: never echo key material
            raise AuthenticationError(
                f"Could not load wallet: {type(e).__name__}. Check private key format."
            ) from None

        self.store = store
        self.settings = settings
        self.client = client or BaseAPIClient(
            settings.api_base_url,
            settings,
            headers={
                "content-type": "application/json",
                "origin": settings.site_url,
                "referer": f"{settings.site_url}/",
            }
        )
        self.retry_strategy = RetryStrategy(
            max_retries=settings.max_retries,
            delay=settings.retry_delay,
            retry_on=(Exception,),
            sleep=sleep
        )

    @property
    def address(self) -> str:
        """Checksummed wallet address."""
        return self._account.address

    def build_sign_in_message(
        self,
        nonce: Optional[str] = None,
        issued_at: Optional[str] = None
    ) -> SignInMessage:
        """
        Build a sign-in message for this wallet.

        Args:
            nonce: Hex nonce (32 random bytes if None)
            issued_at: ISO timestamp (now if None)
        """
        fields = {
            "address": self.address,
            "nonce": nonce or secrets.token_hex(32),
            "chain_id": self.settings.chain_id,
        }
        if issued_at:
            fields["issued_at"] = issued_at
        return SignInMessage(**fields)

    def sign(self, message: str) -> str:
        """
        Sign text with the wallet key.

        Returns:
            0x-prefixed 65-byte signature
        """
        try:
            signed = self._account.sign_message(encode_defunct(text=message))
        except Exception as e:
            error_type = type(e).__name__
            logger.error(f"Failed to sign sign-in message: {error_type}")
            raise AuthenticationError(f"Signature failed: {error_type}") from None
        return to_hex(signed.signature)

    def _verify(self) -> str:
        """Single sign-and-verify attempt."""
        message = self.build_sign_in_message().render()
        logger.debug(f"Signing message:\n{message}")

        request = VerifyRequest(signed_message=self.sign(message), message=message)
        data = self.client.post("/verify", json_data=request.model_dump(by_alias=True))

        response = VerifyResponse.model_validate(data if isinstance(data, dict) else {})
        if not response.session_token:
            raise AuthenticationError("No session_token received in response")

        return validate_session_token(response.session_token)

    def authenticate(self) -> str:
        """
        Log in and cache the new session token.

        Returns:
            Session token

        Raises:
            AuthenticationExhaustedError: If every attempt failed
            CredentialError: If the token cannot be persisted
        """
        logger.info(f"Authenticating wallet {self.address}")
        try:
            token = self.retry_strategy.execute(self._verify)
        except Exception as e:
            attempts = self.retry_strategy.max_attempts
            raise AuthenticationExhaustedError(
                f"Authentication failed after {attempts} attempts: {e}",
                last_error=e
            ) from e

        self.store.save_token(token)
        logger.info("Authentication successful!")
        return token
