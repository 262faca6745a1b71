from __future__ import annotations

from typing import Any, Callable
from unittest.mock import AsyncMock

import pytest

from mintkit.models.contract import ContractSnapshot, FeeModel, Platform
from mintkit.models.transaction import FeeSettings
from mintkit.services.rpc import RpcError

TOKEN = "0x" + "ab" * 20
SENDER = "0x" + "cd" * 20


class FakeChain:
    """In-memory stand-in for EvmRpcClient.

    Contract reads are answered from ``reads`` keyed by (address, signature);
    a value may be a plain result, an exception to raise, or a callable that
    receives the call arguments. Unknown reads revert.
    """

    def __init__(self, chain_id: int = 1):
        self.chain_id = chain_id
        self.reads: dict[tuple[str, str], Any] = {}
        self.code: dict[str, str] = {}
        self.read_log: list[tuple[str, str]] = []
        self.eth_call = AsyncMock(return_value="0x")
        self.eth_estimate_gas = AsyncMock(return_value=100_000)
        self.fee_estimate = AsyncMock(
            return_value={"max_fee_per_gas": 30_000_000_000, "max_priority_fee_per_gas": 2_000_000_000}
        )
        self.eth_get_transaction_count = AsyncMock(return_value=0)
        self.eth_send_raw_transaction = AsyncMock(return_value="0x" + "12" * 32)
        self.wait_for_receipt = AsyncMock(
            return_value={"status": "0x1", "blockNumber": "0x10", "gasUsed": "0x5208"}
        )
        self.close = AsyncMock()

    def set(self, address: str, signature: str, value: Any) -> None:
        self.reads[(address.lower(), signature)] = value

    async def read(self, address, signature, args=(), returns=("uint256",)):
        key = (address.lower(), signature)
        self.read_log.append(key)
        if key not in self.reads:
            raise RpcError("execution reverted", code=3)
        value = self.reads[key]
        if isinstance(value, Exception):
            raise value
        if callable(value):
            return value(*args)
        return value

    async def eth_get_code(self, address: str) -> str:
        code = self.code.get(address.lower(), "0x6080604052")
        if isinstance(code, Exception):
            raise code
        return code


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def make_snapshot() -> Callable[..., ContractSnapshot]:
    """Factory fixture for creating ContractSnapshot instances."""

    def _make(
        address: str = TOKEN,
        chain_id: int = 1,
        name: str = "Test Drop",
        platform: Platform = Platform.GENERIC,
        mint_function_signature: str = "mint(uint256)",
        mint_price_per_token: int = 10_000_000_000_000_000,
        protocol_fee: int = 0,
        fee_model: FeeModel = FeeModel.NONE,
        is_active: bool = True,
        **extra: Any,
    ) -> ContractSnapshot:
        return ContractSnapshot(
            address=address,
            chain_id=chain_id,
            name=name,
            platform=platform,
            mint_function_signature=mint_function_signature,
            mint_price_per_token=mint_price_per_token,
            protocol_fee=protocol_fee,
            fee_model=fee_model,
            is_active=is_active,
            **extra,
        )

    return _make


@pytest.fixture
def fees() -> FeeSettings:
    return FeeSettings(max_fee_per_gas=30_000_000_000, max_priority_fee_per_gas=2_000_000_000)
