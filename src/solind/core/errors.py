"""
Exception hierarchy for solind.

Each pipeline stage raises its own error type so callers can tell a bad
configuration from an exhausted network retry or an undecodable account.
"""

from __future__ import annotations


class SolindError(Exception):
    """Base exception for all solind errors."""


# --- Configuration ---

class ConfigurationError(SolindError):
    """Raised for invalid startup configuration (placeholder program id, bad batch size...)."""


# --- Infrastructure ---

class RpcError(SolindError):
    """Raised when the ledger RPC endpoint rejects or fails a request.

    Attributes
    ----------
    code : int | None
        JSON-RPC error code, when the node returned one.
    status : int | None
        HTTP status code, when the failure came from the transport.
    """

    def __init__(self, message: str, *, code: int | None = None, status: int | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.status = status


class LocatorError(SolindError):
    """Raised when the program account listing cannot be obtained."""


class FetchError(SolindError):
    """Raised when a batch of account blobs cannot be fetched after all retries."""


# --- Domain ---

class DecodeError(SolindError):
    """Raised when no truncation length of an account buffer parses."""


class ExportError(SolindError):
    """Raised when the CSV export cannot be written."""
