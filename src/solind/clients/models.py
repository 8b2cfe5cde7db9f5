"""
Pydantic models for the Solana JSON-RPC responses solind consumes.

They are a strict contract for the JSON coming back from the node: anything
that does not fit is rejected here, before it reaches the decoder.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from solind.core.models import AccountBlob, Address, TxReference


class RpcErrorBody(BaseModel):
    """The `error` object of a failed JSON-RPC call."""

    code: int
    message: str
    data: Any = None


class RpcResponse(BaseModel):
    """JSON-RPC 2.0 envelope."""

    jsonrpc: str = "2.0"
    id: int | str | None = None
    result: Any = None
    error: RpcErrorBody | None = None


class AccountInfo(BaseModel):
    """Account as returned with `encoding: base64` (data is `[payload, "base64"]`)."""

    data: tuple[str, str]
    owner: str
    lamports: int = 0
    executable: bool = False

    @field_validator("data")
    @classmethod
    def _base64_only(cls, value: tuple[str, str]) -> tuple[str, str]:
        if value[1] != "base64":
            raise ValueError(f"unexpected account encoding {value[1]!r}")
        return value

    def to_blob(self) -> AccountBlob:
        try:
            raw = base64.b64decode(self.data[0], validate=True)
        except binascii.Error as e:
            raise ValueError(f"invalid base64 account data: {e}") from e
        return AccountBlob(data=raw, owner=self.owner, lamports=self.lamports)


class ProgramAccount(BaseModel):
    """One entry of a `getProgramAccounts` result."""

    pubkey: str
    account: AccountInfo

    def to_domain(self) -> tuple[Address, AccountBlob]:
        return Address.from_string(self.pubkey), self.account.to_blob()


class MultipleAccountsResult(BaseModel):
    """`getMultipleAccounts` result; `None` entries are addresses with no account."""

    value: list[AccountInfo | None]


class SignatureInfo(BaseModel):
    """One entry of a `getSignaturesForAddress` result."""

    signature: str
    slot: int
    err: Any = None
    block_time: int | None = Field(default=None, alias="blockTime")

    def to_domain(self) -> TxReference:
        return TxReference(slot=self.slot, signature=self.signature)


ProgramAccountsAdapter = TypeAdapter(list[ProgramAccount])
SignaturesAdapter = TypeAdapter(list[SignatureInfo])
