"""Shared fixtures for Klok tests."""

from typing import Any, Optional
from unittest.mock import Mock

import orjson
import pytest

from klok.auth.credential_store import CredentialStore
from klok.config import KlokSettings

TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"


def _make_response(status_code: int = 200, body: Any = None,
                   headers: Optional[dict] = None, text: Optional[str] = None) -> Mock:
    """Fake requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.headers = headers or {}
    if text is not None:
        response.content = text.encode()
        response.text = text
    elif body is None:
        response.content = b""
        response.text = ""
    else:
        response.content = orjson.dumps(body)
        response.text = response.content.decode()
    return response


@pytest.fixture
def make_response():
    """Factory for fake requests.Response objects."""
    return _make_response


@pytest.fixture
def private_key():
    """Well-known throwaway test key."""
    return TEST_PRIVATE_KEY


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at temporary credential files, no .env."""
    return KlokSettings(
        _env_file=None,
        token_file=str(tmp_path / "token.txt"),
        private_key_file=str(tmp_path / "private-key.txt"),
    )


@pytest.fixture
def store(settings):
    """Credential store backed by tmp_path."""
    return CredentialStore(settings.token_file, settings.private_key_file)
