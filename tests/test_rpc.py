import base64
import json

import httpx
import pytest

from conftest import PROGRAM, encode_application, make_address
from solind.clients.rpc import SolanaRPC
from solind.core.errors import RpcError
from solind.core.models import TxReference
from solind.fetching.backoff import is_rate_limit_error

URL = "https://rpc.test"


def _account(data: bytes) -> dict:
    return {
        "data": [base64.b64encode(data).decode(), "base64"],
        "owner": str(PROGRAM),
        "lamports": 1_447_680,
        "executable": False,
        "rentEpoch": 18446744073709551615,
    }


def _client(handler) -> SolanaRPC:
    return SolanaRPC(URL, transport=httpx.MockTransport(handler))


def _ok(request: httpx.Request, result) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})


@pytest.mark.asyncio
async def test_get_program_accounts_filters_by_size() -> None:
    seen = {}
    data = encode_application()

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(json.loads(request.content))
        return _ok(request, [{"pubkey": str(make_address(5)), "account": _account(data)}])

    rpc = _client(handler)
    try:
        accounts = await rpc.get_program_accounts(PROGRAM, data_size=72)
    finally:
        await rpc.aclose()

    assert seen["method"] == "getProgramAccounts"
    assert seen["params"][0] == str(PROGRAM)
    assert seen["params"][1]["filters"] == [{"dataSize": 72}]
    assert seen["params"][1]["commitment"] == "finalized"
    assert seen["params"][1]["encoding"] == "base64"
    [(address, blob)] = accounts
    assert address == make_address(5)
    assert blob.data == data
    assert blob.size == 72


@pytest.mark.asyncio
async def test_get_multiple_accounts_keeps_missing_entries() -> None:
    seen = {}
    data = encode_application()

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(json.loads(request.content))
        return _ok(request, {"context": {"slot": 42}, "value": [_account(data), None]})

    rpc = _client(handler)
    try:
        blobs = await rpc.get_multiple_accounts([make_address(1), make_address(2)])
    finally:
        await rpc.aclose()

    assert seen["method"] == "getMultipleAccounts"
    assert seen["params"][0] == [str(make_address(1)), str(make_address(2))]
    assert blobs[0].data == data
    assert blobs[1] is None


@pytest.mark.asyncio
async def test_get_latest_signature() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(json.loads(request.content))
        return _ok(
            request,
            [{"signature": "5sig", "slot": 321, "err": None, "memo": None, "blockTime": 1700000000}],
        )

    rpc = _client(handler)
    try:
        ref = await rpc.get_latest_signature(make_address(3))
    finally:
        await rpc.aclose()

    assert seen["method"] == "getSignaturesForAddress"
    assert seen["params"] == [str(make_address(3)), {"limit": 1}]
    assert ref == TxReference(slot=321, signature="5sig")


@pytest.mark.asyncio
async def test_no_signatures_is_none() -> None:
    rpc = _client(lambda request: _ok(request, []))
    try:
        assert await rpc.get_latest_signature(make_address(3)) is None
    finally:
        await rpc.aclose()


@pytest.mark.asyncio
async def test_http_429_is_a_rate_limit() -> None:
    rpc = _client(lambda request: httpx.Response(429, text="Too many requests for a specific RPC call"))
    try:
        with pytest.raises(RpcError) as exc_info:
            await rpc.get_multiple_accounts([make_address(1)])
    finally:
        await rpc.aclose()

    assert exc_info.value.status == 429
    assert is_rate_limit_error(exc_info.value)


@pytest.mark.asyncio
async def test_json_rpc_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        return httpx.Response(
            200,
            json={"jsonrpc": "2.0", "id": body["id"], "error": {"code": -32005, "message": "Node is behind"}},
        )

    rpc = _client(handler)
    try:
        with pytest.raises(RpcError, match="Node is behind") as exc_info:
            await rpc.get_program_accounts(PROGRAM, data_size=72)
    finally:
        await rpc.aclose()

    assert exc_info.value.code == -32005
    assert not is_rate_limit_error(exc_info.value)


@pytest.mark.asyncio
async def test_transport_failure_becomes_rpc_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    rpc = _client(handler)
    try:
        with pytest.raises(RpcError, match="ConnectError"):
            await rpc.get_latest_signature(make_address(1))
    finally:
        await rpc.aclose()


@pytest.mark.asyncio
async def test_unexpected_encoding_is_rejected() -> None:
    account = _account(b"\x00" * 72)
    account["data"][1] = "jsonParsed"
    rpc = _client(lambda request: _ok(request, {"context": {"slot": 1}, "value": [account]}))
    try:
        with pytest.raises(RpcError, match="unexpected result"):
            await rpc.get_multiple_accounts([make_address(1)])
    finally:
        await rpc.aclose()
