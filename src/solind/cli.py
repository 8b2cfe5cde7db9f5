import asyncio
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)

from solind.constants import ACCOUNT_DATA_SIZE, DEVNET_RPC_URL, OUTPUT_DIR, PROGRAM_ID_PLACEHOLDER
from solind.core.config import ExportConfig, RateLimitConfig
from solind.core.errors import SolindError

console = Console()


def setup_logging(level: str) -> None:
    """Route log records through rich so they interleave cleanly with the progress bar."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


@click.group()
def cli() -> None:
    """solind: export program-owned Solana accounts to CSV."""


@cli.command("export")
@click.option(
    "--program-id",
    envvar="SOLIND_PROGRAM_ID",
    default=PROGRAM_ID_PLACEHOLDER,
    show_envvar=True,
    help="Program whose accounts are exported",
)
@click.option("--rpc", envvar="SOLIND_RPC_URL", default=DEVNET_RPC_URL, show_default=True, show_envvar=True)
@click.option("--account-size", type=int, default=ACCOUNT_DATA_SIZE, show_default=True, help="Exact account data size")
@click.option("--batch-size", type=int, default=100, show_default=True, help="Accounts per getMultipleAccounts call")
@click.option(
    "--with-signatures/--no-signatures",
    default=True,
    show_default=True,
    help="Look up each account's latest transaction (slot + signature)",
)
@click.option("--out-dir", type=click.Path(file_okay=False, path_type=Path), default=OUTPUT_DIR, show_default=True)
@click.option("--prefix", "file_prefix", default=None, help="CSV filename prefix")
@click.option("--max-retries", type=int, default=5, show_default=True, help="Retries on rate limiting")
@click.option("--other-retries", type=int, default=2, show_default=True, help="Retries on other RPC failures")
@click.option("--base-delay-ms", type=int, default=1_000, show_default=True)
@click.option("--max-delay-ms", type=int, default=30_000, show_default=True)
@click.option("--batch-delay-ms", type=int, default=2_000, show_default=True)
@click.option("--request-delay-ms", type=int, default=100, show_default=True)
@click.option("--timeout", "timeout_s", type=int, default=30, show_default=True, help="HTTP timeout (s)")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
def export_cmd(
    program_id: str,
    rpc: str,
    account_size: int,
    batch_size: int,
    with_signatures: bool,
    out_dir: Path,
    file_prefix: str | None,
    max_retries: int,
    other_retries: int,
    base_delay_ms: int,
    max_delay_ms: int,
    batch_delay_ms: int,
    request_delay_ms: int,
    timeout_s: int,
    log_level: str,
) -> None:
    """Enumerate the program's accounts, decode them and write a timestamped CSV."""
    setup_logging(log_level)

    config = ExportConfig(
        program_id=program_id,
        rpc_url=rpc,
        account_size=account_size,
        batch_size=batch_size,
        with_signatures=with_signatures,
        out_dir=out_dir,
        file_prefix=file_prefix,
        timeout_s=timeout_s,
        rate_limits=RateLimitConfig(
            max_retries=max_retries,
            other_retries=other_retries,
            base_delay_ms=base_delay_ms,
            max_delay_ms=max_delay_ms,
            batch_delay_ms=batch_delay_ms,
            request_delay_ms=request_delay_ms,
        ),
    )

    from solind.api.export_data import export_accounts

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold]exporting accounts[/]"),
        BarColumn(),
        MofNCompleteColumn(),
        TextColumn("•"),
        TimeElapsedColumn(),
        TextColumn("→"),
        TimeRemainingColumn(),
        console=console,
        transient=False,
        expand=True,
    )

    async def run():
        with progress:
            task = progress.add_task("batches", total=None)

            def on_batch(done: int, total: int) -> None:
                progress.update(task, completed=done, total=total)

            return await export_accounts(config=config, on_batch=on_batch)

    try:
        output = asyncio.run(run())
    except SolindError as e:
        raise click.ClickException(str(e)) from e

    stats = output.stats
    console.print(
        f"[bold]summary[/]: "
        f"accounts={stats.addresses}  batches={stats.batches}  "
        f"[green]decoded[/]={stats.decoded}  "
        f"[red]failed[/]={stats.failed}  "
        f"[yellow]absent[/]={stats.absent}"
        + (
            f"  signatures={stats.references_found}  missing={stats.references_missing}"
            if config.with_signatures
            else ""
        )
    )
    for failure in output.failures:
        console.print(f"[red]undecodable[/] {failure.address}: {failure.reason}")
    if output.csv_path is not None:
        console.print(f"[bold]csv[/]: {output.csv_path}")
    else:
        console.print("[red]csv export failed[/] (see log above)")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
