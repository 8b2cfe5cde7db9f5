import random
from unittest.mock import AsyncMock

import pytest

from solind.core.config import RateLimitConfig
from solind.core.models import AccountBlob, Address
from solind.fetching.backoff import RetryPolicy

PROGRAM = Address(bytes(range(1, 33)))


class ZeroRandom(random.Random):
    """Jitter source that always returns 0."""

    def random(self) -> float:
        return 0.0


class RecordingSleep:
    """Stand-in for asyncio.sleep that records delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def make_address(i: int) -> Address:
    return Address(i.to_bytes(4, "big") + bytes(28))


def encode_application(
    *,
    user: bytes = bytes(range(32)),
    bump: int = 254,
    pre_req_ts: int = 1,
    pre_req_rs: int = 0,
    github: str = "octocat",
    size: int | None = 72,
    discriminator: bytes = b"\xaa" * 8,
) -> bytes:
    """Serialize an application account the way the on-chain program lays it out."""
    handle = github.encode("utf-8")
    data = (
        discriminator
        + user
        + bytes([bump, pre_req_ts, pre_req_rs])
        + len(handle).to_bytes(4, "little")
        + handle
    )
    if size is not None:
        data = data + bytes(size - len(data))
    return data


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def limits() -> RateLimitConfig:
    return RateLimitConfig()


@pytest.fixture
def policy(limits: RateLimitConfig, sleep: RecordingSleep) -> RetryPolicy:
    return RetryPolicy(limits, sleep=sleep, rng=ZeroRandom())


@pytest.fixture
def mock_rpc():
    rpc = AsyncMock()
    rpc.get_program_accounts = AsyncMock(return_value=[])
    rpc.get_multiple_accounts = AsyncMock(return_value=[])
    rpc.get_latest_signature = AsyncMock(return_value=None)
    rpc.aclose = AsyncMock()
    return rpc


@pytest.fixture
def blob_factory():
    def _make(**kwargs) -> AccountBlob:
        return AccountBlob(data=encode_application(**kwargs), owner=str(PROGRAM), lamports=1_447_680)

    return _make
