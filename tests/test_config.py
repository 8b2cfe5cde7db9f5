from pathlib import Path

import pytest

from conftest import PROGRAM
from solind.core.config import ExportConfig, RateLimitConfig
from solind.core.errors import ConfigurationError


def test_defaults() -> None:
    config = ExportConfig(program_id=str(PROGRAM))

    config.validate()
    assert config.account_size == 72
    assert config.batch_size == 100
    assert config.out_dir == Path("./output")
    assert config.program_address() == PROGRAM


@pytest.mark.parametrize("program_id", ["Enter Program ID here", "", "  Enter Program ID here  "])
def test_placeholder_program_id_is_rejected(program_id: str) -> None:
    with pytest.raises(ConfigurationError, match="Program ID is not set"):
        ExportConfig(program_id=program_id).validate()


@pytest.mark.parametrize("program_id", ["not-base58-0OIl", "3mJr7AoUXx2Wqd"])
def test_malformed_program_id_is_rejected(program_id: str) -> None:
    with pytest.raises(ConfigurationError, match="not a valid address"):
        ExportConfig(program_id=program_id).validate()


@pytest.mark.parametrize("batch_size", [0, -1, 101])
def test_batch_size_bounds(batch_size: int) -> None:
    with pytest.raises(ConfigurationError, match="batch_size"):
        ExportConfig(program_id=str(PROGRAM), batch_size=batch_size).validate()


def test_rate_limits_are_validated() -> None:
    config = ExportConfig(
        program_id=str(PROGRAM),
        rate_limits=RateLimitConfig(base_delay_ms=5_000, max_delay_ms=1_000),
    )
    with pytest.raises(ConfigurationError):
        config.validate()


def test_prefix_follows_variant() -> None:
    assert ExportConfig(program_id=str(PROGRAM)).prefix == "time_stamped_accounts"
    assert ExportConfig(program_id=str(PROGRAM), with_signatures=False).prefix == "application_accounts"
    assert ExportConfig(program_id=str(PROGRAM), file_prefix="mine").prefix == "mine"
