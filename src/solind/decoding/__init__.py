"""Account decoding for the fixed application layout.

This package provides:
- Record layout primitives (FieldSpec, RecordSchema, APPLICATION_SCHEMA)
- A byte reader with typed field parsers
- The decoder with its trailing-byte trimming fallback
"""

from solind.decoding.decoder import decode_account, decode_application, parse_fields, parse_with_trim
from solind.decoding.specs import APPLICATION_SCHEMA, FieldSpec, RecordSchema

__all__ = [
    "decode_account",
    "decode_application",
    "parse_fields",
    "parse_with_trim",
    "APPLICATION_SCHEMA",
    "FieldSpec",
    "RecordSchema",
]
