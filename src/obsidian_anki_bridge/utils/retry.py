"""Retry logic with exponential backoff for AnkiConnect calls."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

from .logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def retry(
    max_attempts: int | Callable[[Any], int] = 3,
    initial_delay: float | Callable[[Any], float] = 0.5,
    backoff_factor: float = 2.0,
    exceptions: tuple[type[BaseException], ...] = (Exception,),
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Retry an async method with exponential backoff.

    ``max_attempts`` and ``initial_delay`` may be callables that receive the
    bound instance, so a client can read them from its own settings.

    Args:
        max_attempts: Maximum number of attempts (at least 1)
        initial_delay: Delay before the second attempt, in seconds
        backoff_factor: Multiplier for delay after each attempt
        exceptions: Exception types that trigger another attempt

    Returns:
        Decorator function
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            owner = args[0] if args else None
            attempts = max_attempts(owner) if callable(max_attempts) else max_attempts
            delay = initial_delay(owner) if callable(initial_delay) else initial_delay
            attempts = max(1, attempts)
            started = time.monotonic()
            waited = 0.0

            for attempt in range(1, attempts + 1):
                try:
                    result = await func(*args, **kwargs)
                except exceptions as e:
                    if attempt == attempts:
                        logger.error(
                            "retry_exhausted",
                            func=func.__name__,
                            attempts=attempt,
                            error=str(e),
                            error_type=type(e).__name__,
                            total_retry_time=round(time.monotonic() - started, 2),
                        )
                        raise
                    logger.warning(
                        "retry_attempt",
                        func=func.__name__,
                        attempt=attempt,
                        max_attempts=attempts,
                        delay=delay,
                        error=str(e),
                        error_type=type(e).__name__,
                        cumulative_wait_time=round(waited, 2),
                    )
                    await asyncio.sleep(delay)
                    waited += delay
                    delay *= backoff_factor
                else:
                    if attempt > 1:
                        logger.info(
                            "retry_succeeded",
                            func=func.__name__,
                            attempt=attempt,
                            cumulative_wait_time=round(waited, 2),
                        )
                    return result

            raise AssertionError("unreachable")

        return wrapper

    return decorator
