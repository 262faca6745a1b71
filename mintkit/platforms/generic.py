from __future__ import annotations

from mintkit.models.contract import ContractSnapshot, FeeModel, Platform, TokenStandard
from mintkit.platforms.base import PlatformModule
from mintkit.services.rpc import EvmRpcClient
from mintkit.services.resolver import (
    compose_activity,
    effective_wallet_limit,
    first_success,
    settle_all,
)
from mintkit.utils.abi import normalize_signature

PRICE_ACCESSORS = [
    "cost()",
    "price()",
    "mintPrice()",
    "salePrice()",
    "tokenPrice()",
    "MINT_PRICE()",
    "PRICE()",
    "value()",
]

ERC1155_INTERFACE = bytes.fromhex("d9b67a26")


class GenericAnalyzer(PlatformModule):
    """Best-effort fallback for contracts no platform module claims.

    Every field is read independently and defaulted, so the result is always
    a fully populated snapshot even against a contract that exposes nothing.
    """

    name = "generic"

    def __init__(self, client: EvmRpcClient, mint_function: str | None = None):
        super().__init__(client)
        self.mint_function = mint_function

    async def _detect(self, address: str, chain_id: int) -> bool:
        return True

    async def analyze(self, address: str, chain_id: int) -> ContractSnapshot:
        fields = await settle_all(
            {
                "name": (self._read(address, "name()", returns=("string",)), "Unknown"),
                "total_supply": (self._read(address, "totalSupply()"), 0),
                "max_supply": (self._read(address, "maxSupply()"), 0),
                "paused": (self._read(address, "paused()", returns=("bool",)), False),
                "is_active": (self._read(address, "isActive()", returns=("bool",)), True),
                "sale_active": (self._read(address, "saleActive()", returns=("bool",)), True),
                "max_per_wallet": (self._read(address, "maxPerWallet()"), 0),
                "wallet_limit": (self._read(address, "walletLimit()"), 0),
                "price": (
                    first_success(
                        (self._read(address, fn) for fn in PRICE_ACCESSORS), 0, field="price"
                    ),
                    0,
                ),
                "is_1155": (
                    self._read(
                        address,
                        "supportsInterface(bytes4)",
                        [ERC1155_INTERFACE],
                        returns=("bool",),
                    ),
                    False,
                ),
            }
        )

        signature = (
            normalize_signature(self.mint_function) if self.mint_function else "mint(uint256)"
        )
        max_per_wallet = effective_wallet_limit(fields["max_per_wallet"], fields["wallet_limit"])

        return ContractSnapshot(
            address=address,
            chain_id=chain_id,
            name=fields["name"],
            platform=Platform.GENERIC,
            token_standard=TokenStandard.ERC1155 if fields["is_1155"] else TokenStandard.ERC721,
            mint_function_signature=signature,
            mint_price_per_token=fields["price"],
            fee_model=FeeModel.NONE,
            is_active=compose_activity(
                fields["paused"], fields["is_active"], fields["sale_active"]
            ),
            total_supply=fields["total_supply"],
            max_supply=fields["max_supply"],
            max_per_wallet=max_per_wallet or None,
        )
