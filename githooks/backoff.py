"""Polling with quadratic back-off, used to enforce hook deadlines."""

import time
from collections.abc import Callable

BASE_SLEEP = 0.001
MAX_SLEEP = 0.050


def backoffDelay(attempt: int) -> float:
    """Sleep before poll ``attempt + 1``: ``attempt**2`` ms, capped at 50 ms.

    Attempts 1..8 sleep 1, 4, 9, 16, 25, 36, 49, 50 ms, so a 190 ms budget is
    exhausted after 8 polls.
    """
    return min(attempt**2 * BASE_SLEEP, MAX_SLEEP)


def timeoutWithQuadraticBackoff(timeout: float, isComplete: Callable[[], bool]) -> bool:
    """Poll ``isComplete`` until it returns True or ``timeout`` seconds pass.

    Returns True on completion, False on timeout. Sleeps never overshoot the
    remaining budget.
    """
    start = time.monotonic()
    attempt = 1

    while True:
        if isComplete():
            return True

        elapsed = time.monotonic() - start
        if elapsed >= timeout:
            return False

        sleep_time = min(backoffDelay(attempt), max(timeout - elapsed, 0.0))
        time.sleep(sleep_time)
        attempt += 1
