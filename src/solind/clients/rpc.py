"""Lightweight JSON-RPC client for Solana nodes.

This module provides:
- `SolanaRPC`: an async client with sane timeouts, one connection at a time
- Helpers building the request params for the three calls the pipeline uses

It returns domain records (`Address`, `AccountBlob`, `TxReference`). Every
failure, transport or node-side, surfaces as `RpcError`; retrying is the
caller's job.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import httpx

from solind.clients.models import (
    MultipleAccountsResult,
    ProgramAccountsAdapter,
    RpcResponse,
    SignaturesAdapter,
)
from solind.core.errors import RpcError
from solind.core.models import AccountBlob, Address, TxReference


def program_accounts_params(program_id: Address, data_size: int, commitment: str) -> list[Any]:
    """Params for getProgramAccounts filtered by exact data size."""
    return [
        str(program_id),
        {
            "encoding": "base64",
            "commitment": commitment,
            "filters": [{"dataSize": data_size}],
        },
    ]


def multiple_accounts_params(addresses: Sequence[Address], commitment: str) -> list[Any]:
    return [[str(a) for a in addresses], {"encoding": "base64", "commitment": commitment}]


def signatures_params(address: Address, limit: int = 1) -> list[Any]:
    return [str(address), {"limit": limit}]


class SolanaRPC:
    """Minimal async Solana RPC client.

    Parameters
    ----------
    url : str
        RPC endpoint URL.
    timeout_s : int
        Per-operation timeout in seconds (connect/read/write).
    listing_commitment : str
        Commitment used for the program account listing.
    commitment : str
        Commitment used for account and signature reads.
    transport : httpx.AsyncBaseTransport | None
        Optional transport override (tests use `httpx.MockTransport`).
    """

    def __init__(
        self,
        url: str,
        *,
        timeout_s: int = 30,
        listing_commitment: str = "finalized",
        commitment: str = "confirmed",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.listing_commitment = listing_commitment
        self.commitment = commitment
        self._request_id = 0
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(
                connect=timeout_s,
                read=timeout_s,
                write=timeout_s,
                pool=timeout_s,
            ),
            # requests are strictly sequential
            limits=httpx.Limits(max_connections=1, max_keepalive_connections=1),
            transport=transport,
        )

    def _next_id(self) -> int:
        self._request_id += 1
        return self._request_id

    async def _call(self, method: str, params: list[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": self._next_id(), "method": method, "params": params}
        try:
            r = await self.client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            raise RpcError(f"{method}: {type(e).__name__}: {e}") from e

        if r.status_code >= 400:
            raise RpcError(f"{method}: HTTP {r.status_code} {r.reason_phrase}", status=r.status_code)

        try:
            body = RpcResponse.model_validate(r.json())
        except ValueError as e:
            raise RpcError(f"{method}: malformed JSON-RPC response: {e}", status=r.status_code) from e

        if body.error is not None:
            raise RpcError(f"RPC error: {body.error.code} {body.error.message}", code=body.error.code)
        return body.result

    async def get_program_accounts(
        self,
        program_id: Address,
        *,
        data_size: int,
    ) -> list[tuple[Address, AccountBlob]]:
        """Return (address, blob) pairs owned by `program_id` with exactly `data_size` bytes."""
        result = await self._call(
            "getProgramAccounts",
            program_accounts_params(program_id, data_size, self.listing_commitment),
        )
        try:
            return [entry.to_domain() for entry in ProgramAccountsAdapter.validate_python(result or [])]
        except ValueError as e:
            raise RpcError(f"getProgramAccounts: unexpected result: {e}") from e

    async def get_multiple_accounts(self, addresses: Sequence[Address]) -> list[AccountBlob | None]:
        """Return one blob (or None) per address, in request order."""
        result = await self._call(
            "getMultipleAccounts",
            multiple_accounts_params(addresses, self.commitment),
        )
        try:
            parsed = MultipleAccountsResult.model_validate(result)
            return [info.to_blob() if info is not None else None for info in parsed.value]
        except ValueError as e:
            raise RpcError(f"getMultipleAccounts: unexpected result: {e}") from e

    async def get_latest_signature(self, address: Address) -> TxReference | None:
        """Return the most recent signature touching `address`, or None."""
        result = await self._call("getSignaturesForAddress", signatures_params(address, limit=1))
        try:
            signatures = SignaturesAdapter.validate_python(result or [])
        except ValueError as e:
            raise RpcError(f"getSignaturesForAddress: unexpected result: {e}") from e
        return signatures[0].to_domain() if signatures else None

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()
