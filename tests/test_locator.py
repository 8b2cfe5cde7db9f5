import pytest

from conftest import PROGRAM, make_address
from solind.core.errors import LocatorError, RpcError
from solind.fetching.locator import AddressLocator


@pytest.mark.asyncio
async def test_locate_returns_addresses_in_listing_order(mock_rpc, policy, blob_factory, sleep) -> None:
    addresses = [make_address(i) for i in (3, 1, 2)]
    mock_rpc.get_program_accounts.return_value = [(a, blob_factory()) for a in addresses]

    found = await AddressLocator(mock_rpc, policy).locate(PROGRAM, 72)

    assert found == addresses
    mock_rpc.get_program_accounts.assert_awaited_once_with(PROGRAM, data_size=72)
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_locate_retries_once_on_rate_limit(mock_rpc, policy, blob_factory, sleep) -> None:
    address = make_address(1)
    mock_rpc.get_program_accounts.side_effect = [
        RpcError("HTTP 429 Too Many Requests", status=429),
        [(address, blob_factory())],
    ]

    found = await AddressLocator(mock_rpc, policy).locate(PROGRAM, 72)

    assert found == [address]
    assert sleep.delays == [1.0]


@pytest.mark.asyncio
async def test_second_rate_limit_is_fatal(mock_rpc, policy, sleep) -> None:
    mock_rpc.get_program_accounts.side_effect = RpcError("rate limit", status=429)

    with pytest.raises(LocatorError):
        await AddressLocator(mock_rpc, policy).locate(PROGRAM, 72)

    assert mock_rpc.get_program_accounts.await_count == 2
    assert sleep.delays == [1.0]


@pytest.mark.asyncio
async def test_other_errors_are_fatal_immediately(mock_rpc, policy, sleep) -> None:
    mock_rpc.get_program_accounts.side_effect = RpcError("RPC error: -32602 Invalid param", code=-32602)

    with pytest.raises(LocatorError, match="Invalid param"):
        await AddressLocator(mock_rpc, policy).locate(PROGRAM, 72)

    assert mock_rpc.get_program_accounts.await_count == 1
    assert sleep.delays == []
