"""Fixed-layout account decoder with a trailing-byte trimming fallback.

This module turns raw account bytes into `ApplicationRecord` using a
`RecordSchema`. A parse must consume the buffer exactly; when it does not
(zero padding after a short string, stale trailing bytes), the buffer is
trimmed from the end one byte at a time and re-parsed, and the first length
that parses wins.
"""

from __future__ import annotations

from typing import Any

from solind.core.errors import DecodeError
from solind.core.models import (
    AccountBlob,
    Address,
    ApplicationRecord,
    Absent,
    Decoded,
    DecodeFailed,
    DecodeOutcome,
)
from solind.decoding.specs import APPLICATION_SCHEMA, RecordSchema
from solind.decoding.utils import ByteReader, read_field


# ---------- schema parsing ----------


def parse_fields(data: bytes, schema: RecordSchema) -> dict[str, Any]:
    """Parse `data` against `schema`; leftover bytes are an error."""
    reader = ByteReader(data)
    values = {spec.name: read_field(reader, spec) for spec in schema.fields}
    if reader.remaining:
        raise ValueError(f"Unexpected {reader.remaining} bytes after deserialized data")
    return values


def parse_with_trim(data: bytes, schema: RecordSchema) -> tuple[dict[str, Any], int]:
    """Parse `data`, falling back to trimmed prefixes from the longest down.

    Returns
    -------
    (values, used_length)
        Parsed field values and the buffer length that parsed.

    Raises
    ------
    DecodeError
        If no length in [0, len(data)] parses. Chained to the original failure.
    """
    try:
        return parse_fields(data, schema), len(data)
    except ValueError as original:
        for length in range(len(data) - 1, -1, -1):
            try:
                return parse_fields(data[:length], schema), length
            except ValueError:
                continue
        raise DecodeError(f"{schema.name}: {original}") from original


# ---------- application record ----------


def _to_record(values: dict[str, Any]) -> ApplicationRecord:
    return ApplicationRecord(
        owner_address=Address(values["user"]).to_base58(),
        bump_seed=values["bump"],
        pre_req_ts=values["pre_req_ts"] != 0,
        pre_req_rs=values["pre_req_rs"] != 0,
        github_handle=values["github"],
    )


def decode_application(data: bytes, schema: RecordSchema = APPLICATION_SCHEMA) -> ApplicationRecord:
    """Decode one raw application account (discriminator included)."""
    if len(data) < schema.discriminator_size:
        raise DecodeError(
            f"{schema.name}: {len(data)} bytes is shorter than the "
            f"{schema.discriminator_size}-byte discriminator"
        )
    values, _ = parse_with_trim(data[schema.discriminator_size :], schema)
    return _to_record(values)


def decode_account(
    address: Address,
    blob: AccountBlob | None,
    schema: RecordSchema = APPLICATION_SCHEMA,
) -> DecodeOutcome:
    """Decode one fetched account into a tagged outcome (never raises DecodeError)."""
    if blob is None:
        return Absent(address)
    try:
        return Decoded(address, decode_application(blob.data, schema))
    except DecodeError as e:
        return DecodeFailed(address, str(e))
