# chess_coach/utils/retry.py
"""
An asynchronous retry decorator for the coach's network calls.

A dropped connection or a request that runs past its timeout is retried with
an exponentially growing, jittered delay. When the last attempt fails the
original exception propagates, and the caller turns it into a placeholder
message.
"""
import asyncio
import functools
import random
from typing import Any, Callable, Coroutine, Iterator, Tuple, Type

import structlog

from chess_coach.utils import metrics

logger = structlog.get_logger(__name__)

# Errors that say nothing about the request itself and may succeed on a second try.
DEFAULT_TRANSIENT_EXCEPTIONS: Tuple[Type[Exception], ...] = (
    ConnectionError,
    TimeoutError,
    asyncio.TimeoutError,
)


def backoff_delays(initial_s: float, max_s: float, jitter_factor: float) -> Iterator[float]:
    """
    Yields an endless series of wait times: `initial_s`, doubled each step,
    each varied by up to +/- `jitter_factor` of itself and capped at `max_s`.
    """
    delay = initial_s
    while True:
        jitter = random.uniform(-delay * jitter_factor, delay * jitter_factor)
        yield max(0.0, min(max_s, delay + jitter))
        delay *= 2


def retry_with_backoff(
    attempts: int = 3,
    initial_backoff_s: float = 0.5,
    max_backoff_s: float = 5.0,
    jitter_factor: float = 0.2,
    exceptions_to_catch: Tuple[Type[Exception], ...] = DEFAULT_TRANSIENT_EXCEPTIONS,
    service: str = "unknown",
) -> Callable[[Callable[..., Coroutine]], Callable[..., Coroutine]]:
    """
    Retries the decorated coroutine function on transient errors.

    Args:
        attempts: Total number of calls, including the first one. Values
                  below 1 are treated as 1.
        initial_backoff_s: Wait before the first retry.
        max_backoff_s: Upper bound for any single wait.
        jitter_factor: Relative randomness added to every wait.
        exceptions_to_catch: Exception classes that trigger a retry. Anything
                             else propagates immediately.
        service: Label for the transient-error counter, e.g. "gemini".
    """
    total = max(1, attempts)

    def decorator(func: Callable[..., Coroutine]) -> Callable[..., Coroutine]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            delays = backoff_delays(initial_backoff_s, max_backoff_s, jitter_factor)
            for attempt in range(1, total + 1):
                try:
                    return await func(*args, **kwargs)
                except exceptions_to_catch as e:
                    if attempt == total:
                        logger.warning(
                            "Giving up after transient errors.",
                            service=service,
                            total_attempts=total,
                            error=repr(e),
                        )
                        raise
                    wait_time = next(delays)
                    metrics.ADVISORY_TRANSIENT_ERRORS_TOTAL.labels(service=service).inc()
                    logger.warning(
                        "Transient error, retrying.",
                        service=service,
                        attempt=attempt,
                        wait_seconds=round(wait_time, 2),
                        error=repr(e),
                    )
                    await asyncio.sleep(wait_time)
        return wrapper
    return decorator
