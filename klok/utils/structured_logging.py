"""
Structured JSON logging and credential redaction.

Adds correlation IDs to log lines and keeps wallet keys and session
tokens out of every handler's output.
"""

import json
import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Optional
from contextvars import ContextVar

_correlation_id: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)


class CredentialRedactionFilter(logging.Filter):
    """
    Security filter that redacts credentials from log messages.

    - Redacts Ethereum private keys (0x followed by 64 hex chars)
    - Redacts session tokens in key=value / header form
    - Redacts credentials in formatted exception text

    Usage:
        >>> handler = logging.StreamHandler()
        >>> handler.addFilter(CredentialRedactionFilter())
        >>> logger.addHandler(handler)
    """

    PRIVATE_KEY_PATTERN = re.compile(r'0x[0-9a-fA-F]{64}(?![0-9a-fA-F])')
    SESSION_TOKEN_PATTERN = re.compile(
        r'((?:x-session-token|session_token|token|secret|password)["\']?\s*[:=]\s*["\']?)'
        r'[A-Za-z0-9._\-+/=]{8,}',
        re.IGNORECASE
    )

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Redact credentials from log record.

        Returns:
            Always True (record is never filtered out, just sanitized)
        """
        if record.msg:
            record.msg = self._redact_credentials(str(record.msg))

        if record.args:
            if isinstance(record.args, dict):
                record.args = {
                    k: self._redact_value(v)
                    for k, v in record.args.items()
                }
            elif isinstance(record.args, tuple):
                record.args = tuple(
                    self._redact_value(arg)
                    for arg in record.args
                )

        # Formatters reuse a cached exc_text, so render it here first
        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)

        if record.exc_text:
            record.exc_text = self._redact_credentials(record.exc_text)

        return True

    def _redact_value(self, value):
        """Redact string arguments; leave other types for %-formatting."""
        if isinstance(value, str):
            return self._redact_credentials(value)
        return value

    def _redact_credentials(self, text: str) -> str:
        """Redact all credential patterns from text."""
        if not text:
            return text

        text = self.PRIVATE_KEY_PATTERN.sub('0x[REDACTED]', text)
        text = self.SESSION_TOKEN_PATTERN.sub(r'\1[REDACTED]', text)

        return text


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs as JSON for easy parsing by log aggregators.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = _correlation_id.get()
        if correlation_id:
            log_data["correlation_id"] = correlation_id

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": redact_credentials(str(record.exc_info[1])),
                "traceback": record.exc_text or self.formatException(record.exc_info)
            }

        return json.dumps(log_data, default=str)


_REDACTOR = CredentialRedactionFilter()


def redact_credentials(text: str) -> str:
    """Redact wallet keys and session tokens from arbitrary text."""
    return _REDACTOR._redact_credentials(text)


def set_correlation_id(correlation_id: Optional[str] = None, prefix: str = "req") -> str:
    """
    Set correlation ID for current context.

    Args:
        correlation_id: Correlation ID (generates one if None)
        prefix: Prefix for generated IDs

    Returns:
        The correlation ID set
    """
    if correlation_id is None:
        correlation_id = f"{prefix}_{uuid.uuid4().hex[:12]}"

    _correlation_id.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    """Clear correlation ID from current context."""
    _correlation_id.set(None)
