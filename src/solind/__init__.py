from __future__ import annotations

from .api.export_data import export_accounts
from .core.config import ExportConfig, RateLimitConfig
from .core.models import Address, ApplicationRecord, ExportOutput
from .decoding.decoder import decode_application
from .decoding.specs import APPLICATION_SCHEMA, FieldSpec, RecordSchema

__all__ = [
    "export_accounts",
    "ExportConfig",
    "RateLimitConfig",
    "Address",
    "ApplicationRecord",
    "ExportOutput",
    "decode_application",
    "APPLICATION_SCHEMA",
    "FieldSpec",
    "RecordSchema",
]
