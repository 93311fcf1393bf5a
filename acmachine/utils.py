"""Polling helper shared by drivers."""

import logging
import time

from acmachine.errors import DriverError

logger = logging.getLogger(__name__)


class RetriesExceededError(DriverError):
    def __init__(self, max_attempts):
        self.max_attempts = max_attempts
        super().__init__(f"Maximum number of retries ({max_attempts}) exceeded")


def wait_for_specific_or_error(check, max_attempts, wait_interval):
    """Call *check* until it reports done, sleeping *wait_interval* seconds between tries.

    *check* returns a ``(done, error)`` tuple. ``done`` with an error stops
    polling and raises that error; ``done`` without one returns. Exceptions
    raised by *check* itself propagate unchanged.

    Raises:
        RetriesExceededError: *check* never reported done.
    """
    for attempt in range(max_attempts):
        done, err = check()
        if done:
            if err is not None:
                raise err
            return
        logger.debug(f"Attempt {attempt + 1}/{max_attempts} not done, sleeping {wait_interval}s")
        time.sleep(wait_interval)
    raise RetriesExceededError(max_attempts)
