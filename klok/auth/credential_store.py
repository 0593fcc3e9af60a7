"""
Flat-file credential storage.

The private key is a read-only input; the session token is cached
between runs and overwritten after every successful login.
"""

from pathlib import Path
from typing import Optional, Union
import logging

from ..exceptions import CredentialError
from ..utils.validators import validate_private_key

logger = logging.getLogger(__name__)


class CredentialStore:
    """Reads the wallet key and reads/writes the cached session token."""

    def __init__(
        self,
        token_file: Union[str, Path] = "token.txt",
        private_key_file: Union[str, Path] = "private-key.txt"
    ):
        self.token_file = Path(token_file)
        self.private_key_file = Path(private_key_file)

    def load_token(self) -> Optional[str]:
        """
        Load the cached session token.

        Returns:
            Token, or None when the file is missing, unreadable or empty
        """
        try:
            token = self.token_file.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"No cached token at {self.token_file}: {type(e).__name__}")
            return None

        return token or None

    def save_token(self, token: str) -> None:
        """
        Overwrite the cached session token.

        Raises:
            CredentialError: If the file cannot be written
        """
        try:
            self.token_file.write_text(token, encoding="utf-8")
        except OSError as e:
            raise CredentialError(
                f"Could not write token file {self.token_file}: {e.strerror or e}",
                path=str(self.token_file)
            ) from e

        logger.debug(f"Saved session token to {self.token_file}")

    def load_private_key(self) -> str:
        """
        Load and normalize the wallet private key.

        Raises:
            CredentialError: If the file is missing or unreadable
            ValidationError: If the contents are not a 32-byte hex key
        """
        try:
            raw = self.private_key_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise CredentialError(
                f"Could not read private key file {self.private_key_file}: {type(e).__name__}",
                path=str(self.private_key_file)
            ) from e

        return validate_private_key(raw)
