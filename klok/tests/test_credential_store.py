"""Tests for the credential store."""

import pytest

from klok.auth.credential_store import CredentialStore
from klok.exceptions import CredentialError, ValidationError


def test_token_round_trip(store):
    """Saved token is what gets loaded back."""
    store.save_token("abc.def-123")
    assert store.load_token() == "abc.def-123"


def test_save_token_overwrites(store):
    """Each save replaces the previous token."""
    store.save_token("first")
    store.save_token("second")
    assert store.load_token() == "second"


def test_load_token_missing_file_returns_none(store):
    """Missing token file is not an error."""
    assert store.load_token() is None


def test_load_token_strips_whitespace_and_ignores_empty(store):
    """Trailing newlines are trimmed; empty files count as no token."""
    store.token_file.write_text("tok\n")
    assert store.load_token() == "tok"

    store.token_file.write_text("   \n")
    assert store.load_token() is None


def test_load_token_unreadable_returns_none(tmp_path):
    """A directory in place of the file is treated as no token."""
    (tmp_path / "token.txt").mkdir()
    store = CredentialStore(tmp_path / "token.txt", tmp_path / "key.txt")
    assert store.load_token() is None


def test_save_token_failure_raises(tmp_path):
    """Write failures reach the caller."""
    store = CredentialStore(tmp_path / "missing-dir" / "token.txt", tmp_path / "key.txt")
    with pytest.raises(CredentialError) as exc_info:
        store.save_token("tok")
    assert exc_info.value.path.endswith("token.txt")


def test_load_private_key(store, private_key):
    """Key is read and normalized to lowercase 0x form."""
    store.private_key_file.write_text(private_key[2:].upper() + "\n")
    assert store.load_private_key() == private_key


def test_load_private_key_missing_file(store):
    """Missing key file is fatal."""
    with pytest.raises(CredentialError):
        store.load_private_key()


def test_load_private_key_invalid(store):
    """Garbage in the key file is rejected."""
    store.private_key_file.write_text("not-a-key")
    with pytest.raises(ValidationError):
        store.load_private_key()
