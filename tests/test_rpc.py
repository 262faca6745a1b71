from __future__ import annotations

import json

import httpx
import pytest
from eth_abi import encode

from conftest import TOKEN
from mintkit.services.rpc import EvmRpcClient, RpcError, to_rpc_tx
from mintkit.utils.errors import FieldReadError


def _client(results: dict) -> tuple[EvmRpcClient, list]:
    """RPC client whose transport answers each method from ``results``."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        seen.append(payload)
        answer = results[payload["method"]]
        if isinstance(answer, dict) and "error" in answer:
            body = {"jsonrpc": "2.0", "id": payload["id"], "error": answer["error"]}
        else:
            body = {"jsonrpc": "2.0", "id": payload["id"], "result": answer}
        return httpx.Response(200, json=body)

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return EvmRpcClient("http://rpc.test", chain_id=1, client=http), seen


class TestToRpcTx:
    def test_hex_encodes_quantities(self):
        assert to_rpc_tx({"to": TOKEN, "value": 16, "gas": None, "data": "0x"}) == {
            "to": TOKEN,
            "value": "0x10",
            "data": "0x",
        }


class TestRead:
    @pytest.mark.asyncio
    async def test_read_decodes(self):
        client, seen = _client({"eth_call": "0x" + encode(["uint256"], [5]).hex()})
        assert await client.read(TOKEN, "totalSupply()") == 5
        assert seen[0]["params"][0]["data"] == "0x18160ddd"
        assert seen[0]["params"][1] == "latest"

    @pytest.mark.asyncio
    async def test_empty_result_is_field_error(self):
        client, _ = _client({"eth_call": "0x"})
        with pytest.raises(FieldReadError):
            await client.read(TOKEN, "totalSupply()")

    @pytest.mark.asyncio
    async def test_revert_carries_data(self):
        client, _ = _client(
            {
                "eth_call": {
                    "error": {"code": 3, "message": "execution reverted", "data": "0xc288bf8f"}
                }
            }
        )
        with pytest.raises(RpcError) as exc:
            await client.eth_call({"to": TOKEN, "data": "0x"})
        assert exc.value.data == "0xc288bf8f"
        assert exc.value.code == 3

    @pytest.mark.asyncio
    async def test_nested_revert_data(self):
        client, _ = _client(
            {
                "eth_call": {
                    "error": {
                        "code": -32000,
                        "message": "reverted",
                        "data": {"data": "0xdeadbeef"},
                    }
                }
            }
        )
        with pytest.raises(RpcError) as exc:
            await client.eth_call({"to": TOKEN, "data": "0x"})
        assert exc.value.data == "0xdeadbeef"


class TestFees:
    @pytest.mark.asyncio
    async def test_base_fee_scaled_plus_priority(self):
        client, _ = _client(
            {
                "eth_getBlockByNumber": {"baseFeePerGas": hex(10_000)},
                "eth_maxPriorityFeePerGas": hex(100),
            }
        )
        estimate = await client.fee_estimate(120)
        assert estimate == {"max_fee_per_gas": 12_100, "max_priority_fee_per_gas": 100}

    @pytest.mark.asyncio
    async def test_legacy_chain_uses_gas_price(self):
        client, _ = _client(
            {
                "eth_getBlockByNumber": {"number": "0x1"},
                "eth_maxPriorityFeePerGas": {"error": {"code": -32601, "message": "not found"}},
                "eth_gasPrice": hex(777),
            }
        )
        estimate = await client.fee_estimate()
        assert estimate == {"max_fee_per_gas": 777, "max_priority_fee_per_gas": None}


class TestReceipts:
    @pytest.mark.asyncio
    async def test_wait_for_receipt_times_out(self):
        client, _ = _client({"eth_getTransactionReceipt": None})
        with pytest.raises(TimeoutError):
            await client.wait_for_receipt("0x01", timeout=0, poll_interval=0)

    @pytest.mark.asyncio
    async def test_chain_id(self):
        client, _ = _client({"eth_chainId": "0x2105"})
        assert await client.eth_chain_id() == 8453
        await client.close()
