"""Rate-limit classification and exponential backoff with jitter.

`RetryPolicy.run` is the single retry loop used by every resilient RPC call:

    INIT → REQUESTING → SUCCESS
                      → BACKOFF → REQUESTING   (while under the ceiling)
                      → FAILED                 (ceiling reached)

Rate-limit failures get `max_retries` retries, anything else gets
`other_retries`. The delay before retry n (0-indexed) is
`min(base * 2**n, max_delay) + U[0, jitter)`.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from solind.core.config import RateLimitConfig
from solind.core.errors import RpcError
from solind.core.interfaces import Sleep
from solind.core.models import RetryState

RATE_LIMIT_MARKERS = (
    "too many requests",
    "rate limit",
    "http 429",
    "throttled",
    "quota exceeded",
)
RATE_LIMIT_CODE = 429


def is_rate_limit_error(exc: BaseException) -> bool:
    """True when `exc` signals throttling rather than a genuine failure."""
    if isinstance(exc, RpcError) and RATE_LIMIT_CODE in (exc.code, exc.status):
        return True
    message = str(exc).lower()
    return any(marker in message for marker in RATE_LIMIT_MARKERS)


def backoff_delay_ms(attempt: int, limits: RateLimitConfig) -> int:
    """Non-jittered delay before retry `attempt` (0-indexed)."""
    return min(limits.base_delay_ms * (2**attempt), limits.max_delay_ms)


# ---------- tagged results ----------


@dataclass(frozen=True, slots=True)
class Succeeded:
    value: Any
    attempts: int


@dataclass(frozen=True, slots=True)
class Exhausted:
    error: RpcError
    attempts: int


RetryOutcome = Succeeded | Exhausted


# ---------- policy ----------


class RetryPolicy:
    """Bounded retry loop shared by the locator and the fetcher.

    Parameters
    ----------
    limits : RateLimitConfig
        Retry ceilings and delays.
    sleep : Sleep
        Awaitable sleep in seconds; injectable for tests.
    rng : random.Random | None
        Jitter source; a fresh `random.Random()` when omitted.
    """

    def __init__(
        self,
        limits: RateLimitConfig,
        *,
        sleep: Sleep = asyncio.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self.limits = limits
        self.sleep = sleep
        self.rng = rng or random.Random()
        self.logger = logging.getLogger(self.__class__.__name__)

    def delay_ms(self, attempt: int) -> float:
        """Jittered delay before retry `attempt`; jitter lies in [0, jitter_ms)."""
        return backoff_delay_ms(attempt, self.limits) + self.rng.random() * self.limits.jitter_ms

    def ceiling(self, exc: RpcError) -> int:
        return self.limits.max_retries if is_rate_limit_error(exc) else self.limits.other_retries

    async def pause_ms(self, delay_ms: float) -> None:
        if delay_ms > 0:
            await self.sleep(delay_ms / 1000)

    async def run(self, call: Callable[[], Awaitable[Any]], *, label: str) -> RetryOutcome:
        """Await `call` until it succeeds or its failure class runs out of retries."""
        state = RetryState()
        while True:
            try:
                value = await call()
            except RpcError as e:
                ceiling = self.ceiling(e)
                if state.attempt >= ceiling:
                    self.logger.debug(f"{label}: giving up after {state.attempt + 1} attempt(s): {e}")
                    return Exhausted(e, attempts=state.attempt + 1)
                state.next_delay_ms = int(self.delay_ms(state.attempt))
                reason = "rate limited" if is_rate_limit_error(e) else "request failed"
                self.logger.warning(
                    f"{label}: {reason} (retry {state.attempt + 1}/{ceiling} "
                    f"in {state.next_delay_ms / 1000:.2f}s): {e}"
                )
                await self.pause_ms(state.next_delay_ms)
                state.attempt += 1
            else:
                return Succeeded(value, attempts=state.attempt + 1)
