from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from solind.core.interfaces import ILedgerRpc, IRecordSink
from solind.core.models import (
    Absent,
    Address,
    ApplicationRecord,
    Decoded,
    DecodeFailed,
    ExportOutput,
    ExportStats,
)
from solind.decoding.decoder import decode_account
from solind.decoding.specs import APPLICATION_SCHEMA, RecordSchema
from solind.fetching.backoff import RetryPolicy
from solind.fetching.fetcher import FetchedBatch, ResilientFetcher
from solind.fetching.locator import AddressLocator
from solind.fetching.partition import partition
from solind.storage.csv_export import timestamped_filename

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Domain configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExportAccountsConfig:
    """
    Domain-level configuration for the export use case.

    Free of infrastructure concerns (no RPC URL, no output directory).
    """

    program_id: Address
    account_size: int
    batch_size: int
    with_references: bool
    file_prefix: str
    schema: RecordSchema = APPLICATION_SCHEMA


BatchCallback = Callable[[int, int], None]


# ---------------------------------------------------------------------------
# Batch collection
# ---------------------------------------------------------------------------


def collect_batch(
    fetched: FetchedBatch,
    *,
    stats: ExportStats,
    records: list[ApplicationRecord],
    failures: list[DecodeFailed],
    schema: RecordSchema = APPLICATION_SCHEMA,
) -> None:
    """
    Decode one fetched batch and append results in address order.

    A record that cannot be decoded is skipped and reported in `failures`;
    it never discards the rest of the run.
    """
    references = fetched.references
    for i, (address, blob) in enumerate(zip(fetched.addresses, fetched.blobs)):
        outcome = decode_account(address, blob, schema)
        match outcome:
            case Decoded(record=record):
                if references is not None:
                    ref = references[i]
                    if ref is None:
                        stats.references_missing += 1
                    else:
                        stats.references_found += 1
                    record = record.with_reference(ref)
                records.append(record)
                stats.decoded += 1
            case DecodeFailed():
                logger.warning(f"Skipping {outcome.address}: {outcome.reason}")
                failures.append(outcome)
                stats.failed += 1
            case Absent():
                logger.warning(f"Skipping {outcome.address}: account no longer exists")
                stats.absent += 1


# ---------------------------------------------------------------------------
# Domain service – AccountExportService
# ---------------------------------------------------------------------------


class AccountExportService:
    """
    Domain service for the locate → batch → fetch → decode → export pipeline.

    It depends only on abstract providers (ILedgerRpc, IRecordSink) and a
    retry policy. Batches are processed strictly in order, one request at a
    time, so the exported rows keep the order of the account listing.
    """

    def __init__(
        self,
        rpc: ILedgerRpc,
        sink: IRecordSink,
        policy: RetryPolicy,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._locator = AddressLocator(rpc, policy)
        self._fetcher = ResilientFetcher(rpc, policy)
        self._sink = sink
        self._clock = clock
        self.logger = logging.getLogger(self.__class__.__name__)

    async def run(
        self,
        config: ExportAccountsConfig,
        *,
        on_batch: BatchCallback | None = None,
    ) -> ExportOutput:
        """
        Execute the export.

        Parameters
        ----------
        config : ExportAccountsConfig
            Program, size filter, batch size and export options.
        on_batch : BatchCallback | None
            Called with (done, total) after each batch, for progress display.

        Raises
        ------
        LocatorError
            If the program accounts cannot be listed.
        FetchError
            If a batch still fails after its retries.
        """
        started_at = self._clock()
        stats = ExportStats()
        records: list[ApplicationRecord] = []
        failures: list[DecodeFailed] = []

        # 1) Enumerate addresses (read-only for the rest of the run)
        addresses = await self._locator.locate(config.program_id, config.account_size)
        stats.addresses = len(addresses)

        # 2) Batch
        batches = partition(addresses, config.batch_size)
        stats.batches = len(batches)
        if on_batch is not None:
            on_batch(0, len(batches))

        # 3) Fetch + decode, batch by batch
        for idx, batch in enumerate(batches, start=1):
            self.logger.info(f"Fetching batch {idx}/{len(batches)} ({len(batch)} accounts)")
            fetched = await self._fetcher.fetch_batch(batch, with_references=config.with_references)
            collect_batch(
                fetched,
                stats=stats,
                records=records,
                failures=failures,
                schema=config.schema,
            )
            if on_batch is not None:
                on_batch(idx, len(batches))
            if idx < len(batches):
                await self._fetcher.pause_between_batches()

        if failures:
            self.logger.warning(f"{len(failures)} account(s) could not be decoded and were left out")

        # 4) Export
        rows = [r.as_row(include_reference=config.with_references) for r in records]
        filename = timestamped_filename(config.file_prefix, started_at)
        csv_path = self._sink.save(rows, filename)

        return ExportOutput(stats=stats, records=records, failures=failures, csv_path=csv_path)
