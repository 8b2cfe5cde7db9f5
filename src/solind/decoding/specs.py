"""Record layout primitives.

Defines lightweight dataclasses describing a fixed Borsh-style account layout:
- `FieldSpec`: one named field with its wire type
- `RecordSchema`: ordered fields behind an Anchor discriminator
- `APPLICATION_SCHEMA`: the application account this tool exports
"""

from __future__ import annotations

from dataclasses import dataclass

from solind.constants import ADDRESS_SIZE, DISCRIMINATOR_SIZE

# Wire types understood by `decoding.utils.read_field`:
#   "u8"     → unsigned byte
#   "u32"    → little-endian u32
#   "bytes"  → fixed-size byte array (needs `size`)
#   "string" → u32 little-endian length prefix + UTF-8 payload
FIELD_TYPES = frozenset({"u8", "u32", "bytes", "string"})


@dataclass(frozen=True)
class FieldSpec:
    """Describe one field of the record body."""

    name: str
    type: str
    size: int | None = None  # only for "bytes"

    def __post_init__(self):
        if self.type not in FIELD_TYPES:
            raise ValueError(f"{self.name}: unsupported field type {self.type!r}")
        if self.type == "bytes" and not self.size:
            raise ValueError(f"{self.name}: fixed byte arrays need a size")


@dataclass(frozen=True)
class RecordSchema:
    """Ordered field layout of one account type."""

    name: str
    fields: tuple[FieldSpec, ...]
    discriminator_size: int = DISCRIMINATOR_SIZE


APPLICATION_SCHEMA = RecordSchema(
    name="ApplicationAccount",
    fields=(
        FieldSpec("user", "bytes", ADDRESS_SIZE),
        FieldSpec("bump", "u8"),
        FieldSpec("pre_req_ts", "u8"),  # bool stored as u8
        FieldSpec("pre_req_rs", "u8"),
        FieldSpec("github", "string"),
    ),
)
