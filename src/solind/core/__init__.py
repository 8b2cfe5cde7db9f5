"""Core data models, configuration, errors and interfaces.

This package provides:
- Data models (Address, AccountBlob, TxReference, ApplicationRecord, ExportOutput)
- Configuration classes (ExportConfig, RateLimitConfig)
- The exception hierarchy rooted at SolindError
"""

from solind.core.config import ExportConfig, RateLimitConfig
from solind.core.errors import (
    ConfigurationError,
    DecodeError,
    ExportError,
    FetchError,
    LocatorError,
    RpcError,
    SolindError,
)
from solind.core.models import AccountBlob, Address, ApplicationRecord, ExportOutput, ExportStats, TxReference

__all__ = [
    "ExportConfig",
    "RateLimitConfig",
    "ConfigurationError",
    "DecodeError",
    "ExportError",
    "FetchError",
    "LocatorError",
    "RpcError",
    "SolindError",
    "AccountBlob",
    "Address",
    "ApplicationRecord",
    "ExportOutput",
    "ExportStats",
    "TxReference",
]
