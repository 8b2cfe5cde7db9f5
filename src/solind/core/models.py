"""Core data models for the account export pipeline.

This module defines:
- `Address`: 32-byte account key with its base-58 string form.
- `AccountBlob` / `TxReference`: raw RPC results for one address.
- `ApplicationRecord`: the decoded application account.
- `RetryState`: per-call retry counter used by the backoff loop.
- `Decoded` / `DecodeFailed` / `Absent`: tagged decode outcomes.
- `ExportStats` / `ExportOutput`: run summary handed back to callers.

Design notes
------------
- Records keep a fixed field order; `as_row` is what the CSV exporter sees.
- Decode outcomes replace exceptions at the pipeline boundary, so one bad
  account never discards the rest of the run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import base58

from solind.constants import ADDRESS_SIZE


# === Keys ===


@dataclass(frozen=True, slots=True)
class Address:
    """A 32-byte ledger address."""

    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != ADDRESS_SIZE:
            raise ValueError(f"address must be {ADDRESS_SIZE} bytes, got {len(self.raw)}")

    @classmethod
    def from_string(cls, value: str) -> Address:
        """Parse a base-58 address string."""
        try:
            raw = base58.b58decode(value.strip())
        except ValueError as e:
            raise ValueError(f"invalid base-58 address {value!r}: {e}") from e
        return cls(raw)

    def to_base58(self) -> str:
        return base58.b58encode(self.raw).decode("ascii")

    def __str__(self) -> str:
        return self.to_base58()


Batch = tuple[Address, ...]


# === RPC records ===


@dataclass(frozen=True, slots=True)
class AccountBlob:
    """Raw account data as returned by the RPC node, plus metadata."""

    data: bytes
    owner: str
    lamports: int = 0

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True, slots=True)
class TxReference:
    """Most recent transaction touching an address."""

    slot: int
    signature: str


# === Decoded record ===


@dataclass(frozen=True, slots=True)
class ApplicationRecord:
    """One decoded application account (field order is the CSV column order)."""

    owner_address: str
    bump_seed: int
    pre_req_ts: bool
    pre_req_rs: bool
    github_handle: str
    slot: int | None = None
    signature: str | None = None

    def with_reference(self, ref: TxReference | None) -> ApplicationRecord:
        """Attach the latest transaction reference (0 / "" when none was found)."""
        return ApplicationRecord(
            owner_address=self.owner_address,
            bump_seed=self.bump_seed,
            pre_req_ts=self.pre_req_ts,
            pre_req_rs=self.pre_req_rs,
            github_handle=self.github_handle,
            slot=ref.slot if ref else 0,
            signature=ref.signature if ref else "",
        )

    def as_row(self, *, include_reference: bool) -> dict[str, Any]:
        row: dict[str, Any] = {
            "owner_address": self.owner_address,
            "bump_seed": self.bump_seed,
            "pre_req_ts": self.pre_req_ts,
            "pre_req_rs": self.pre_req_rs,
            "github_handle": self.github_handle,
        }
        if include_reference:
            row["slot"] = self.slot or 0
            row["signature"] = self.signature or ""
        return row


# === Retry bookkeeping ===


@dataclass(slots=True)
class RetryState:
    """Ephemeral retry counter for a single resilient call."""

    attempt: int = 0
    next_delay_ms: int = 0


# === Decode outcomes ===


@dataclass(frozen=True, slots=True)
class Decoded:
    address: Address
    record: ApplicationRecord


@dataclass(frozen=True, slots=True)
class DecodeFailed:
    address: Address
    reason: str


@dataclass(frozen=True, slots=True)
class Absent:
    address: Address


DecodeOutcome = Decoded | DecodeFailed | Absent


# === Run summary ===


@dataclass(kw_only=True)
class ExportStats:
    """Counters for one export run."""

    addresses: int = 0
    batches: int = 0
    decoded: int = 0
    failed: int = 0
    absent: int = 0
    references_found: int = 0
    references_missing: int = 0


@dataclass(kw_only=True)
class ExportOutput:
    """High-level output of the export use case."""

    stats: ExportStats
    records: list[ApplicationRecord]
    failures: list[DecodeFailed] = field(default_factory=list)
    csv_path: Path | None = None
