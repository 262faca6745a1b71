"""Turn a contract snapshot into an executable, fee-priced mint transaction.

Calldata comes from a table of known mint signatures, each with its own
argument layout. Anything the table cannot encode falls back to
``mint(uint256)`` with the quantity as sole argument.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import httpx

from mintkit.config import settings
from mintkit.models.contract import ContractSnapshot
from mintkit.models.transaction import FeeSettings, PreparedTransaction
from mintkit.platforms.thirdweb import NATIVE_CURRENCY
from mintkit.services.revert import advisory_hints, decode_revert
from mintkit.services.rpc import EvmRpcClient, RpcError
from mintkit.utils.abi import encode_call, hex_to_bytes, normalize_signature, parse_signature
from mintkit.utils.address import ZERO_ADDRESS
from mintkit.utils.errors import (
    ChainUnavailableError,
    ConfigurationError,
    GasEstimationError,
    SimulationError,
)

logger = logging.getLogger("builder")

FALLBACK_SIGNATURE = "mint(uint256)"  # selector 0xa0712d68
MAX_UINT256 = 2**256 - 1


class MintCall:
    """Everything an argument layout may need to know about one mint."""

    def __init__(
        self,
        snapshot: ContractSnapshot,
        quantity: int,
        price_per_token: int,
        sender: str | None,
        fee_recipient: str,
    ):
        self.snapshot = snapshot
        self.quantity = quantity
        self.price_per_token = price_per_token
        self.sender = sender
        self.fee_recipient = fee_recipient

    @property
    def recipient(self) -> str:
        if not self.sender:
            raise ValueError("A sender address is required to name the token recipient")
        return self.sender


def _quantity_only(call: MintCall) -> list[Any]:
    return [call.quantity]


def _recipient_and_quantity(call: MintCall) -> list[Any]:
    return [call.recipient, call.quantity]


def _seadrop_mint_public(call: MintCall) -> list[Any]:
    # nftContract, feeRecipient, minterIfNotPayer, quantity
    return [call.snapshot.address, call.fee_recipient, ZERO_ADDRESS, call.quantity]


def _scatter_mint(call: MintCall) -> list[Any]:
    key = hex_to_bytes(call.snapshot.invite_key or "0x" + "00" * 32)
    # (auth key, empty proof), quantity, affiliate, signature
    return [(key, []), call.quantity, ZERO_ADDRESS, b""]


def _thirdweb_claim(call: MintCall) -> list[Any]:
    currency = call.snapshot.currency or NATIVE_CURRENCY
    # Public claim: empty proof, unlimited price cap
    allowlist_proof = ([], 0, MAX_UINT256, ZERO_ADDRESS)
    return [call.recipient, call.quantity, currency, call.price_per_token, allowlist_proof, b""]


ARGUMENT_BUILDERS: dict[str, Callable[[MintCall], list[Any]]] = {
    "mint(uint256)": _quantity_only,
    "publicMint(uint256)": _quantity_only,
    "purchase(uint256)": _quantity_only,
    "mintDutch(uint256)": _quantity_only,
    "auctionMint(uint256)": _quantity_only,
    "mint(address,uint256)": _recipient_and_quantity,
    "claim(address,uint256)": _recipient_and_quantity,
    "mintPublic(address,address,address,uint256)": _seadrop_mint_public,
    "mint((bytes32,bytes32[]),uint256,address,bytes)": _scatter_mint,
    "claim(address,uint256,address,uint256,(bytes32[],uint256,uint256,address),bytes)": (
        _thirdweb_claim
    ),
}


def argument_builder(signature: str) -> Callable[[MintCall], list[Any]] | None:
    builder = ARGUMENT_BUILDERS.get(signature)
    if builder is None:
        # Any single-quantity function takes the same layout as mint(uint256)
        _, types = parse_signature(signature)
        if types == ["uint256"]:
            return _quantity_only
    return builder


def encode_mint_call(call: MintCall) -> tuple[str, str]:
    """Return (signature actually used, calldata)."""
    signature = normalize_signature(call.snapshot.mint_function_signature)
    try:
        builder = argument_builder(signature)
        if builder is None:
            raise ValueError("no known argument layout")
        return signature, encode_call(signature, builder(call))
    except Exception as e:
        logger.warning(
            f"Cannot encode {signature} ({e}); falling back to {FALLBACK_SIGNATURE}"
        )
        return FALLBACK_SIGNATURE, encode_call(FALLBACK_SIGNATURE, [call.quantity])


class TransactionBuilder:
    def __init__(
        self,
        client: EvmRpcClient,
        sender: str | None = None,
        fee_recipient: str = settings.opensea_fee_recipient,
        fallback_gas_limit: int = settings.fallback_gas_limit,
        turbo_gas_limit: int = settings.turbo_gas_limit,
        gas_limit_buffer_percent: int = settings.gas_limit_buffer_percent,
    ):
        self._client = client
        self.sender = sender
        self.fee_recipient = fee_recipient
        self.fallback_gas_limit = fallback_gas_limit
        self.turbo_gas_limit = turbo_gas_limit
        self.gas_limit_buffer_percent = gas_limit_buffer_percent

    async def simulate(self, tx: dict, snapshot: ContractSnapshot, price_per_token: int) -> None:
        try:
            await self._client.eth_call(tx)
        except RpcError as e:
            reason, selector = decode_revert(e.data, e.message)
            hints = advisory_hints(snapshot, price_per_token)
            logger.error(f"Simulation failed for {snapshot.address}: {reason}")
            raise SimulationError(reason, selector=selector, hints=hints) from e
        except httpx.HTTPError as e:
            raise ChainUnavailableError(f"Simulation request failed: {e}") from e
        logger.info("Simulation successful")

    async def estimate_gas(self, tx: dict) -> int:
        try:
            estimate = await self._client.eth_estimate_gas(tx)
        except (RpcError, httpx.HTTPError, ValueError, TypeError) as e:
            raise GasEstimationError(f"Gas estimation failed: {e}") from e
        return estimate * (100 + self.gas_limit_buffer_percent) // 100

    async def prepare(
        self,
        snapshot: ContractSnapshot,
        quantity: int,
        fees: FeeSettings,
        price_override: int | None = None,
        skip_simulation: bool = False,
        gas_limit: int | None = None,
    ) -> PreparedTransaction:
        if quantity < 1:
            raise ConfigurationError(f"Quantity must be at least 1, got {quantity}")

        price_per_token = (
            price_override if price_override is not None else snapshot.mint_price_per_token
        )
        call = MintCall(snapshot, quantity, price_per_token, self.sender, self.fee_recipient)
        signature, data = encode_mint_call(call)

        if price_override is not None:
            value = price_override * quantity
        else:
            value = snapshot.total_value(quantity)

        to = snapshot.call_target
        logger.info(
            f"Preparing {signature} x{quantity} to {to}, value={value} wei, calldata={data[:10]}.."
        )

        tx = {"to": to, "data": data, "value": value}
        if self.sender:
            tx["from"] = self.sender

        if skip_simulation:
            logger.info("Skipping simulation")
            final_gas = gas_limit or self.turbo_gas_limit
        else:
            await self.simulate(tx, snapshot, price_per_token)
            try:
                final_gas = await self.estimate_gas(tx)
            except GasEstimationError as e:
                logger.warning(f"{e}; using default limit {self.fallback_gas_limit}")
                final_gas = self.fallback_gas_limit

        return PreparedTransaction(
            to=to,
            data=data,
            value=value,
            gas_limit=final_gas,
            max_fee_per_gas=fees.max_fee_per_gas,
            max_priority_fee_per_gas=fees.max_priority_fee_per_gas,
            simulated=not skip_simulation,
        )
