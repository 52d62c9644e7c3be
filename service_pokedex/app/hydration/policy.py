"""
Per-item retry/fallback policy for detail fetches.

Each item moves through ATTEMPTING -> RETRYING(n) -> FALLING_BACK and ends
in RESOLVED or DROPPED. Outcomes are returned as ``Resolution`` values;
upstream errors are captured, not re-raised.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional

from shared.errors import UpstreamError
from shared.logging import get_logger
from shared.retry import RetryConfig, retry_call

from service_pokedex.app.domain.models import DetailRecord


class HydrationState(str, Enum):
    ATTEMPTING = "attempting"
    RETRYING = "retrying"
    FALLING_BACK = "falling_back"
    RESOLVED = "resolved"
    DROPPED = "dropped"


@dataclass
class Resolution:
    """Terminal outcome of resolving one record."""

    record_id: int
    state: HydrationState
    record: Optional[DetailRecord] = None
    error: Optional[BaseException] = None
    attempts: int = 0
    used_fallback: bool = False
    transitions: List[HydrationState] = field(default_factory=list)

    @property
    def resolved(self) -> bool:
        return self.state is HydrationState.RESOLVED


def is_retryable(error: BaseException) -> bool:
    """Only upstream errors flagged as transient are retried."""
    return isinstance(error, UpstreamError) and error.retryable


def detail_retry_config(
    retries: int = 2,
    base_delay: float = 0.5,
    max_delay: float = 5.0,
    jitter: bool = False,
) -> RetryConfig:
    """Retry configuration for detail fetches: ``retries`` extra attempts."""
    return RetryConfig(
        max_attempts=retries + 1,
        base_delay=base_delay,
        max_delay=max_delay,
        exponential_base=2.0,
        jitter=jitter,
    )


class FetchPolicy:
    """Runs primary fetch with bounded retry, then at most one fallback."""

    def __init__(
        self,
        retry_config: Optional[RetryConfig] = None,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.retry_config = retry_config or detail_retry_config()
        self.sleep = sleep
        self.logger = get_logger("pokedex.fetch_policy")

    async def resolve(
        self,
        record_id: int,
        primary: Callable[[], Awaitable[DetailRecord]],
        fallback: Optional[Callable[[], Awaitable[DetailRecord]]] = None,
    ) -> Resolution:
        transitions = [HydrationState.ATTEMPTING]

        def _on_retry(attempt: int, error: BaseException, delay: float) -> None:
            transitions.append(HydrationState.RETRYING)
            self.logger.info(
                "Retrying detail fetch",
                id=record_id,
                retry=attempt,
                delay_seconds=round(delay, 3),
                error=str(error),
            )

        outcome = await retry_call(
            primary,
            config=self.retry_config,
            exceptions=(UpstreamError,),
            retry_if=is_retryable,
            on_retry=_on_retry,
            sleep=self.sleep,
        )
        if outcome.ok:
            transitions.append(HydrationState.RESOLVED)
            return Resolution(
                record_id=record_id,
                state=HydrationState.RESOLVED,
                record=outcome.value,
                attempts=outcome.attempts,
                transitions=transitions,
            )

        attempts = outcome.attempts
        if fallback is None:
            transitions.append(HydrationState.DROPPED)
            return Resolution(
                record_id=record_id,
                state=HydrationState.DROPPED,
                error=outcome.error,
                attempts=attempts,
                transitions=transitions,
            )

        transitions.append(HydrationState.FALLING_BACK)
        self.logger.info("Falling back to catalog locator", id=record_id, error=str(outcome.error))
        attempts += 1
        try:
            record = await fallback()
        except UpstreamError as exc:
            transitions.append(HydrationState.DROPPED)
            return Resolution(
                record_id=record_id,
                state=HydrationState.DROPPED,
                error=exc,
                attempts=attempts,
                used_fallback=True,
                transitions=transitions,
            )

        transitions.append(HydrationState.RESOLVED)
        return Resolution(
            record_id=record_id,
            state=HydrationState.RESOLVED,
            record=record,
            attempts=attempts,
            used_fallback=True,
            transitions=transitions,
        )
