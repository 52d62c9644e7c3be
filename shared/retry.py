"""
Retry mechanism for resilient operations.

``retry_call`` reports its result as a ``RetryOutcome`` value instead of
raising, so callers can chain further recovery steps (fallbacks) on top of
it without using exceptions for control flow.
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, Tuple, Type, TypeVar

from shared.logging import get_logger

T = TypeVar("T")


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(self,
                 max_attempts: int = 3,
                 base_delay: float = 1.0,
                 max_delay: float = 60.0,
                 exponential_base: float = 2.0,
                 jitter: bool = True):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter = jitter

    @property
    def max_retries(self) -> int:
        return self.max_attempts - 1


@dataclass(frozen=True)
class RetryOutcome(Generic[T]):
    """Result of a retried call: either ``value`` or the last ``error``."""

    value: Optional[T] = None
    error: Optional[BaseException] = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """Calculate delay before the retry that follows ``attempt`` (1-based)."""
    delay = min(
        config.base_delay * (config.exponential_base ** (attempt - 1)),
        config.max_delay,
    )

    if config.jitter:
        jitter_amount = delay * 0.1  # 10% jitter
        delay += random.uniform(-jitter_amount, jitter_amount)

    return max(0.0, delay)


async def retry_call(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    config: RetryConfig,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    retry_if: Optional[Callable[[BaseException], bool]] = None,
    on_retry: Optional[Callable[[int, BaseException, float], None]] = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    **kwargs: Any,
) -> RetryOutcome[T]:
    """
    Call ``func`` until it succeeds or the attempt budget is spent.

    Errors for which ``retry_if`` returns False end the loop immediately.
    ``on_retry`` is invoked with (attempt, error, delay) before each sleep.
    """
    logger = get_logger(f"retry.{getattr(func, '__name__', 'call')}")
    last_error: Optional[BaseException] = None

    for attempt in range(1, config.max_attempts + 1):
        try:
            value = await func(*args, **kwargs)
        except exceptions as exc:
            last_error = exc
            if retry_if is not None and not retry_if(exc):
                logger.debug("Non-retryable error", attempt=attempt, error=str(exc))
                return RetryOutcome(error=exc, attempts=attempt)

            if attempt == config.max_attempts:
                logger.debug(
                    "All retry attempts exhausted",
                    attempt=attempt,
                    max_attempts=config.max_attempts,
                    error=str(exc),
                )
                break

            delay = calculate_delay(attempt, config)
            if on_retry is not None:
                on_retry(attempt, exc, delay)
            await sleep(delay)
            continue

        if attempt > 1:
            logger.debug("Retry succeeded", attempt=attempt)
        return RetryOutcome(value=value, attempts=attempt)

    return RetryOutcome(error=last_error, attempts=config.max_attempts)
