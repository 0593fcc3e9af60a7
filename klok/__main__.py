"""
Command-line entry point: ``python -m klok`` or ``klok-bot``.
"""

import asyncio
import sys

from .auth.authenticator import Authenticator
from .auth.credential_store import CredentialStore
from .bot import ChatBot
from .config import get_settings
from .exceptions import KlokError
from .logging_config import get_logger, setup_logging

logger = get_logger("main")


def main() -> int:
    """Load settings and credentials, then run the bot until it exits."""
    settings = get_settings()
    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        json_format=settings.log_json
    )

    logger.info("Starting Klok AI Bot...")
    logger.debug(f"Settings: {settings!r}")

    store = CredentialStore(settings.token_file, settings.private_key_file)
    try:
        private_key = store.load_private_key()
        authenticator = Authenticator(private_key, store, settings)
    except KlokError as e:
        logger.error(f"Bot startup failed: {e.message}")
        return 1

    bot = ChatBot(settings, store, authenticator)
    try:
        return asyncio.run(bot.run())
    except KeyboardInterrupt:
        logger.info("Interrupted. Shutting down...")
        return 0


if __name__ == "__main__":
    sys.exit(main())
