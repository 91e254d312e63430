"""Polling helpers using tenacity."""

from __future__ import annotations

from typing import Callable

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_fixed,
)


def poller(
    *,
    interval_seconds: float,
    max_attempts: int,
    pending: Callable[[object], bool],
    transient: tuple[type[BaseException], ...] = (),
    before_sleep: Callable[[RetryCallState], None] | None = None,
) -> Retrying:
    """Build a fixed-interval poller.

    Calls are repeated while ``pending(result)`` is true or a ``transient``
    exception is raised, up to ``max_attempts`` calls in total. Once attempts
    run out tenacity raises ``RetryError``; any other exception propagates
    immediately.
    """
    retry = retry_if_result(pending)
    if transient:
        retry = retry | retry_if_exception_type(transient)
    return Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_fixed(interval_seconds),
        retry=retry,
        before_sleep=before_sleep,
    )
