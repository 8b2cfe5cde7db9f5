"""Decoding utilities: sequential byte reader and typed field parsers."""

from __future__ import annotations

from typing import Any

from .specs import FieldSpec


class ByteReader:
    """Cursor over a byte buffer; every read past the end raises ValueError."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.offset = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def take(self, n: int) -> bytes:
        if n > self.remaining:
            raise ValueError(
                f"Expected buffer length {n} isn't within bounds at offset {self.offset}"
            )
        chunk = self.data[self.offset : self.offset + n]
        self.offset += n
        return chunk

    def read_u8(self) -> int:
        return self.take(1)[0]

    def read_u32(self) -> int:
        return int.from_bytes(self.take(4), "little", signed=False)

    def read_string(self) -> str:
        length = self.read_u32()
        # UnicodeDecodeError is a ValueError, so bad payloads fail like short ones
        return self.take(length).decode("utf-8")


def read_field(reader: ByteReader, spec: FieldSpec) -> Any:
    """Read one field according to its declared wire type."""
    t = spec.type
    if t == "u8":
        return reader.read_u8()
    if t == "u32":
        return reader.read_u32()
    if t == "bytes":
        return reader.take(spec.size or 0)
    if t == "string":
        return reader.read_string()
    raise ValueError(f"unsupported field type {t!r}")
