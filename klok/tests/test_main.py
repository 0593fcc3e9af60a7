"""Tests for the command-line entry point."""

from unittest.mock import AsyncMock, Mock

import pytest

from klok import __main__ as entry


@pytest.fixture
def patched_entry(monkeypatch, settings):
    monkeypatch.setattr(entry, "get_settings", lambda: settings)
    monkeypatch.setattr(entry, "setup_logging", Mock())
    bot_cls = Mock()
    bot_cls.return_value.run = AsyncMock(return_value=0)
    monkeypatch.setattr(entry, "ChatBot", bot_cls)
    return bot_cls


def test_missing_private_key_exits_1(patched_entry):
    """No private-key.txt: startup is fatal."""
    assert entry.main() == 1
    patched_entry.assert_not_called()


def test_invalid_private_key_exits_1(patched_entry, store):
    store.private_key_file.write_text("nonsense")
    assert entry.main() == 1


def test_runs_bot_with_loaded_key(patched_entry, store, private_key):
    """Valid key: the bot is built and its exit code returned."""
    store.private_key_file.write_text(private_key)

    assert entry.main() == 0

    args = patched_entry.call_args.args
    assert args[2].address.startswith("0x")
    patched_entry.return_value.run.assert_awaited_once()


def test_bot_exit_code_is_returned(patched_entry, store, private_key):
    store.private_key_file.write_text(private_key)
    patched_entry.return_value.run = AsyncMock(return_value=1)

    assert entry.main() == 1
