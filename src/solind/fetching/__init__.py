"""Address listing, batching and resilient retrieval.

This package provides:
- AddressLocator: program account listing filtered by data size
- partition / iter_batches: order-preserving batching
- RetryPolicy: rate-limit aware exponential backoff with jitter
- ResilientFetcher: throttled bulk blob and signature retrieval
"""

from solind.fetching.backoff import (
    Exhausted,
    RetryOutcome,
    RetryPolicy,
    Succeeded,
    backoff_delay_ms,
    is_rate_limit_error,
)
from solind.fetching.fetcher import FetchedBatch, ResilientFetcher
from solind.fetching.locator import AddressLocator
from solind.fetching.partition import iter_batches, partition

__all__ = [
    "AddressLocator",
    "Exhausted",
    "FetchedBatch",
    "ResilientFetcher",
    "RetryOutcome",
    "RetryPolicy",
    "Succeeded",
    "backoff_delay_ms",
    "is_rate_limit_error",
    "iter_batches",
    "partition",
]
