"""Tests for retry strategy."""

from unittest.mock import Mock

import pytest

from klok.exceptions import APIError, ValidationError
from klok.utils.retry import RetryStrategy


def test_every_retry_waits_the_same_delay():
    """Retries sleep a constant delay, never growing."""
    sleeps = []
    func = Mock(side_effect=APIError("boom"), __name__="func")
    strategy = RetryStrategy(max_retries=5, delay=10.0, sleep=sleeps.append)

    with pytest.raises(APIError):
        strategy.execute(func)

    assert func.call_count == 6
    assert strategy.max_attempts == 6
    assert sleeps == [10.0] * 5


def test_succeeds_after_transient_failures():
    """Result of the first successful attempt is returned."""
    sleeps = []
    func = Mock(side_effect=[APIError("a"), APIError("b"), "ok"], __name__="func")
    strategy = RetryStrategy(max_retries=5, delay=1.0, sleep=sleeps.append)

    assert strategy.execute(func) == "ok"
    assert func.call_count == 3
    assert sleeps == [1.0, 1.0]


def test_non_retryable_errors_raise_immediately():
    """Exceptions outside retry_on are not retried."""
    sleeps = []
    func = Mock(side_effect=ValidationError("bad"), __name__="func")
    strategy = RetryStrategy(max_retries=5, delay=1.0, retry_on=(APIError,), sleep=sleeps.append)

    with pytest.raises(ValidationError):
        strategy.execute(func)

    assert func.call_count == 1
    assert sleeps == []


def test_negative_delay_is_clamped():
    strategy = RetryStrategy(max_retries=1, delay=-3.0, sleep=Mock())
    assert strategy.delay == 0


def test_zero_retries_runs_once():
    """max_retries=0 means one attempt and no sleep."""
    sleeps = []
    func = Mock(side_effect=APIError("boom"), __name__="func")

    with pytest.raises(APIError):
        RetryStrategy(max_retries=0, delay=1.0, sleep=sleeps.append).execute(func)

    assert func.call_count == 1
    assert sleeps == []
