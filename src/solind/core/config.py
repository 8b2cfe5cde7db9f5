from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from solind.constants import (
    ACCOUNT_DATA_SIZE,
    ACCOUNTS_PREFIX,
    DEVNET_RPC_URL,
    MAX_MULTIPLE_ACCOUNTS,
    OUTPUT_DIR,
    PROGRAM_ID_PLACEHOLDER,
    TIMESTAMPED_PREFIX,
)
from solind.core.errors import ConfigurationError
from solind.core.models import Address


@dataclass(frozen=True)
class RateLimitConfig:
    """Retry and throttling policy for RPC calls (all delays in milliseconds)."""

    max_retries: int = 5  # retries for rate-limit failures
    other_retries: int = 2  # retries for any other failure
    base_delay_ms: int = 1_000
    max_delay_ms: int = 30_000
    jitter_ms: int = 1_000
    batch_delay_ms: int = 2_000
    request_delay_ms: int = 100

    def validate(self) -> None:
        if self.max_retries < 0 or self.other_retries < 0:
            raise ConfigurationError("retry counts must be >= 0")
        if self.base_delay_ms < 0 or self.max_delay_ms < self.base_delay_ms:
            raise ConfigurationError("delays must satisfy 0 <= base_delay_ms <= max_delay_ms")
        if min(self.jitter_ms, self.batch_delay_ms, self.request_delay_ms) < 0:
            raise ConfigurationError("jitter and throttling delays must be >= 0")


@dataclass(frozen=True)
class ExportConfig:
    """Configuration for one export run."""

    program_id: str
    rpc_url: str = DEVNET_RPC_URL
    account_size: int = ACCOUNT_DATA_SIZE
    batch_size: int = 100
    with_signatures: bool = True
    out_dir: Path = Path(OUTPUT_DIR)
    file_prefix: str | None = None  # defaults depend on with_signatures
    timeout_s: int = 30
    rate_limits: RateLimitConfig = field(default_factory=RateLimitConfig)

    @property
    def prefix(self) -> str:
        if self.file_prefix:
            return self.file_prefix
        return TIMESTAMPED_PREFIX if self.with_signatures else ACCOUNTS_PREFIX

    def program_address(self) -> Address:
        return Address.from_string(self.program_id)

    def validate(self) -> None:
        """Reject unusable settings before any network call is made."""
        if not self.program_id or self.program_id.strip() == PROGRAM_ID_PLACEHOLDER:
            raise ConfigurationError("Program ID is not set")
        try:
            self.program_address()
        except ValueError as e:
            raise ConfigurationError(f"Program ID is not a valid address: {e}") from e
        if not 1 <= self.batch_size <= MAX_MULTIPLE_ACCOUNTS:
            raise ConfigurationError(
                f"batch_size must be between 1 and {MAX_MULTIPLE_ACCOUNTS}, got {self.batch_size}"
            )
        if self.account_size <= 0:
            raise ConfigurationError("account_size must be > 0")
        if self.timeout_s <= 0:
            raise ConfigurationError("timeout_s must be > 0")
        self.rate_limits.validate()
