"""High-level entry point wiring the concrete RPC client and CSV exporter.

`export_accounts(config=...)` validates the configuration, builds
`SolanaRPC` + `CsvExporter` + `RetryPolicy`, runs `AccountExportService`
and always closes the HTTP client.
"""

from __future__ import annotations

import asyncio
import random

from solind.clients.rpc import SolanaRPC
from solind.core.config import ExportConfig
from solind.core.interfaces import ILedgerRpc, IRecordSink, Sleep
from solind.core.models import ExportOutput
from solind.core.use_cases.export_accounts import (
    AccountExportService,
    BatchCallback,
    ExportAccountsConfig,
)
from solind.fetching.backoff import RetryPolicy
from solind.storage.csv_export import CsvExporter


def _domain_config(config: ExportConfig) -> ExportAccountsConfig:
    return ExportAccountsConfig(
        program_id=config.program_address(),
        account_size=config.account_size,
        batch_size=config.batch_size,
        with_references=config.with_signatures,
        file_prefix=config.prefix,
    )


async def export_accounts(
    *,
    config: ExportConfig,
    rpc: ILedgerRpc | None = None,
    sink: IRecordSink | None = None,
    sleep: Sleep = asyncio.sleep,
    rng: random.Random | None = None,
    on_batch: BatchCallback | None = None,
) -> ExportOutput:
    """
    Convenience API for the CLI and scripts.

    Raises `ConfigurationError` before any network call when the
    configuration is unusable.
    """
    config.validate()
    domain_config = _domain_config(config)

    rpc = rpc or SolanaRPC(config.rpc_url, timeout_s=config.timeout_s)
    sink = sink or CsvExporter(config.out_dir)
    policy = RetryPolicy(config.rate_limits, sleep=sleep, rng=rng)

    try:
        service = AccountExportService(rpc, sink, policy)
        return await service.run(domain_config, on_batch=on_batch)
    finally:
        await rpc.aclose()
