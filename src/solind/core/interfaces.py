from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from solind.core.models import AccountBlob, Address, TxReference


# ---------------------------------------------------------------------------
# ILedgerRpc
# ---------------------------------------------------------------------------

@runtime_checkable
class ILedgerRpc(Protocol):
    """
    Abstract provider of ledger account state.

    Domain expectations:
    - Results are already mapped into domain models (Address, AccountBlob, TxReference).
    - Failures surface as `RpcError`; retry policy is NOT the provider's job.
    - Calls are awaited one at a time by the pipeline.
    """

    async def get_program_accounts(
        self,
        program_id: Address,
        *,
        data_size: int,
    ) -> list[tuple[Address, AccountBlob]]:
        """
        Return every (address, blob) owned by `program_id` whose data is exactly
        `data_size` bytes, in the order the node reports them.
        """
        ...

    async def get_multiple_accounts(self, addresses: Sequence[Address]) -> list[AccountBlob | None]:
        """
        Return one entry per requested address, in request order.
        `None` marks an address with no account.
        """
        ...

    async def get_latest_signature(self, address: Address) -> TxReference | None:
        """Return the most recent transaction touching `address`, or None."""
        ...

    async def aclose(self) -> None:
        ...


# ---------------------------------------------------------------------------
# IRecordSink
# ---------------------------------------------------------------------------

@runtime_checkable
class IRecordSink(Protocol):
    """
    Destination for decoded rows.

    Implementations must not raise on write failure: they report it and
    return None so the run can still finish.
    """

    def save(self, rows: list[dict[str, Any]], filename: str) -> Path | None:
        ...


Sleep = Callable[[float], Awaitable[None]]
