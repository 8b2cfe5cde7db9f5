"""Resilient, throttled retrieval of account blobs and latest signatures.

Everything here runs strictly one request at a time: bulk blobs for a batch,
then one signature lookup per address in batch order, each preceded by a
small fixed delay. Rate limiting is the expected failure mode, so every call
goes through the shared `RetryPolicy`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from solind.core.errors import FetchError
from solind.core.interfaces import ILedgerRpc
from solind.core.models import AccountBlob, Address, Batch, TxReference
from solind.fetching.backoff import Exhausted, RetryPolicy


@dataclass(frozen=True, slots=True)
class FetchedBatch:
    """Raw results for one batch, aligned with `addresses`."""

    addresses: Batch
    blobs: list[AccountBlob | None]
    references: list[TxReference | None] | None = None  # None when lookups are disabled


class ResilientFetcher:
    """Fetches batches with backoff on failure and fixed throttling delays."""

    def __init__(self, rpc: ILedgerRpc, policy: RetryPolicy) -> None:
        self.rpc = rpc
        self.policy = policy
        self.logger = logging.getLogger(self.__class__.__name__)

    async def fetch_blobs(self, batch: Batch) -> list[AccountBlob | None]:
        """
        Fetch the account blobs of one batch.

        Raises:
            FetchError: If the batch still fails once its retries are used up.
        """
        outcome = await self.policy.run(
            lambda: self.rpc.get_multiple_accounts(batch),
            label=f"getMultipleAccounts[{len(batch)}]",
        )
        if isinstance(outcome, Exhausted):
            raise FetchError(
                f"getMultipleAccounts failed for a batch of {len(batch)} after "
                f"{outcome.attempts} attempt(s): {outcome.error}"
            ) from outcome.error

        blobs = outcome.value
        if len(blobs) != len(batch):
            raise FetchError(f"getMultipleAccounts returned {len(blobs)} entries for {len(batch)} addresses")
        return blobs

    async def fetch_reference(self, address: Address) -> TxReference | None:
        """Return the latest signature for `address`, or None if none could be found."""
        await self.policy.pause_ms(self.policy.limits.request_delay_ms)
        outcome = await self.policy.run(
            lambda: self.rpc.get_latest_signature(address),
            label=f"getSignaturesForAddress[{address}]",
        )
        if isinstance(outcome, Exhausted):
            self.logger.warning(f"No signature for {address} after {outcome.attempts} attempt(s): {outcome.error}")
            return None
        return outcome.value

    async def fetch_references(self, batch: Batch) -> list[TxReference | None]:
        """Look up signatures sequentially, in batch order."""
        references: list[TxReference | None] = []
        for address in batch:
            references.append(await self.fetch_reference(address))
        return references

    async def fetch_batch(self, batch: Batch, *, with_references: bool) -> FetchedBatch:
        blobs = await self.fetch_blobs(batch)
        references = await self.fetch_references(batch) if with_references else None
        return FetchedBatch(addresses=batch, blobs=blobs, references=references)

    async def pause_between_batches(self) -> None:
        await self.policy.pause_ms(self.policy.limits.batch_delay_ms)
