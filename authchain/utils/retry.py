"""Async retry utilities with exponential backoff."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Tuple, Type, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class RetryConfig:
    def __init__(self, *, attempts: int = 3, base_delay_seconds: float = 0.1) -> None:
        if attempts < 1:
            raise ValueError("Retry attempts must be at least 1.")
        self.attempts = attempts
        self.base_delay_seconds = base_delay_seconds


def backoff_delay(failed_attempts: int, *, base_delay_seconds: float) -> float:
    """Delay to wait after ``failed_attempts`` consecutive failures.

    One failure waits the base delay, each further failure doubles it.
    """
    if failed_attempts < 1:
        return 0.0
    return base_delay_seconds * (2 ** (failed_attempts - 1))


async def retry_async(
    func: Callable[..., Awaitable[T]],
    *args,
    retry_config: RetryConfig | None = None,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    **kwargs,
) -> T:
    """Await ``func`` until it succeeds or the configured attempts run out.

    Exceptions outside ``retry_on`` propagate immediately; the last retryable
    failure is re-raised once attempts are exhausted.
    """
    config = retry_config or RetryConfig()
    attempt = 0

    while True:
        try:
            return await func(*args, **kwargs)
        except retry_on as exc:
            attempt += 1
            if attempt >= config.attempts:
                raise
            delay = backoff_delay(attempt, base_delay_seconds=config.base_delay_seconds)
            logger.warning(
                "Attempt %s/%s failed (%s); retrying in %.3fs",
                attempt,
                config.attempts,
                exc,
                delay,
            )
            await sleep(delay)


__all__ = ["RetryConfig", "backoff_delay", "retry_async"]
