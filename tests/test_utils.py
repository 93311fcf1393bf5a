"""Tests for the polling helper."""

import pytest

from acmachine.utils import RetriesExceededError, wait_for_specific_or_error


def test_wait_returns_when_done(no_sleep):
    results = iter([(False, None), (False, None), (True, None)])

    wait_for_specific_or_error(lambda: next(results), 5, 3)

    assert no_sleep.call_count == 2
    no_sleep.assert_called_with(3)


def test_wait_raises_reported_error(no_sleep):
    err = RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        wait_for_specific_or_error(lambda: (True, err), 5, 3)
    no_sleep.assert_not_called()


def test_wait_check_exception_propagates(no_sleep):
    def check():
        raise ConnectionError("unreachable")

    with pytest.raises(ConnectionError):
        wait_for_specific_or_error(check, 5, 3)


def test_wait_retries_exhausted(no_sleep):
    attempts = []

    def check():
        attempts.append(1)
        return False, None

    with pytest.raises(RetriesExceededError, match=r"Maximum number of retries \(4\) exceeded"):
        wait_for_specific_or_error(check, 4, 1)
    assert len(attempts) == 4
    assert no_sleep.call_count == 4
