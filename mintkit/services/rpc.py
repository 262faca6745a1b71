from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Sequence

import httpx

from mintkit.utils.abi import decode_output, encode_call
from mintkit.utils.errors import FieldReadError

logger = logging.getLogger("rpc")

_QUANTITY_FIELDS = ("value", "gas", "maxFeePerGas", "maxPriorityFeePerGas", "nonce")


class RpcError(Exception):
    """JSON-RPC error object. ``data`` carries raw revert bytes when present."""

    def __init__(self, message: str, code: int | None = None, data: str | None = None):
        self.message = message
        self.code = code
        self.data = data
        super().__init__(f"RPC error {code}: {message}" if code is not None else message)


def _extract_revert_data(error: dict) -> str | None:
    data = error.get("data")
    if isinstance(data, dict):
        data = data.get("data") or data.get("result")
    if isinstance(data, str) and data.startswith("0x"):
        return data
    return None


def to_rpc_tx(tx: dict) -> dict:
    """Hex-encode integer quantities for JSON-RPC transaction objects."""
    out: dict[str, Any] = {}
    for key, value in tx.items():
        if value is None:
            continue
        if key in _QUANTITY_FIELDS and isinstance(value, int):
            out[key] = hex(value)
        else:
            out[key] = value
    return out


class EvmRpcClient:
    def __init__(
        self,
        rpc_url: str,
        chain_id: int | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._url = rpc_url
        self._id = 0
        self._timeout = timeout
        self._client = client
        self.chain_id = chain_id

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def _call(self, method: str, params: list | None = None) -> Any:
        self._id += 1
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": self._id,
        }
        client = self._get_client()
        resp = await client.post(self._url, json=payload)
        resp.raise_for_status()
        data = resp.json()
        if "error" in data:
            error = data["error"] or {}
            raise RpcError(
                error.get("message", "unknown error"),
                code=error.get("code"),
                data=_extract_revert_data(error),
            )
        return data.get("result")

    async def eth_chain_id(self) -> int:
        result = await self._call("eth_chainId")
        return int(result, 16)

    async def eth_get_code(self, address: str) -> str:
        """Get contract code at address. Returns '0x' for EOAs."""
        result = await self._call("eth_getCode", [address, "latest"])
        return result or "0x"

    async def eth_call(self, tx: dict, block: str = "latest") -> str:
        """Dry-run a call. Reverts raise RpcError with the revert payload."""
        result = await self._call("eth_call", [to_rpc_tx(tx), block])
        return result or "0x"

    async def read(
        self,
        address: str,
        signature: str,
        args: Sequence[Any] = (),
        returns: Sequence[str] = ("uint256",),
    ) -> Any:
        result = await self.eth_call({"to": address, "data": encode_call(signature, args)})
        try:
            return decode_output(returns, result)
        except Exception as e:
            raise FieldReadError(f"{signature} on {address}: {e}") from e

    async def eth_estimate_gas(self, tx: dict) -> int:
        result = await self._call("eth_estimateGas", [to_rpc_tx(tx)])
        return int(result, 16)

    async def eth_get_transaction_count(self, address: str, block: str = "pending") -> int:
        result = await self._call("eth_getTransactionCount", [address, block])
        return int(result, 16)

    async def eth_get_block_by_number(self, block: str = "latest") -> dict:
        result = await self._call("eth_getBlockByNumber", [block, False])
        return result or {}

    async def eth_max_priority_fee_per_gas(self) -> int:
        result = await self._call("eth_maxPriorityFeePerGas")
        return int(result, 16)

    async def eth_gas_price(self) -> int:
        result = await self._call("eth_gasPrice")
        return int(result, 16)

    async def fee_estimate(self, base_fee_multiplier_percent: int = 120) -> dict:
        """Return {max_fee_per_gas, max_priority_fee_per_gas}; either may be None."""
        block, priority = await asyncio.gather(
            self.eth_get_block_by_number("latest"),
            self.eth_max_priority_fee_per_gas(),
            return_exceptions=True,
        )
        if isinstance(priority, Exception):
            logger.warning(f"eth_maxPriorityFeePerGas failed: {priority}")
            priority = None

        max_fee = None
        base_fee_hex = block.get("baseFeePerGas") if isinstance(block, dict) else None
        if base_fee_hex:
            base_fee = int(base_fee_hex, 16)
            max_fee = base_fee * base_fee_multiplier_percent // 100 + (priority or 0)
        else:
            try:
                max_fee = await self.eth_gas_price()
            except (httpx.HTTPError, RpcError) as e:
                logger.warning(f"No base fee or gas price available: {e}")

        return {"max_fee_per_gas": max_fee, "max_priority_fee_per_gas": priority}

    async def eth_send_raw_transaction(self, raw_tx: str) -> str:
        return await self._call("eth_sendRawTransaction", [raw_tx])

    async def eth_get_transaction_receipt(self, tx_hash: str) -> dict | None:
        return await self._call("eth_getTransactionReceipt", [tx_hash])

    async def wait_for_receipt(
        self, tx_hash: str, timeout: float = 120.0, poll_interval: float = 1.0
    ) -> dict:
        deadline = time.monotonic() + timeout
        while True:
            receipt = await self.eth_get_transaction_receipt(tx_hash)
            if receipt:
                return receipt
            if time.monotonic() >= deadline:
                raise TimeoutError(f"No receipt for {tx_hash} after {timeout:.0f}s")
            await asyncio.sleep(poll_interval)
