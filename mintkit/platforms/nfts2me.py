from __future__ import annotations

import asyncio

from mintkit.models.contract import ContractSnapshot, FeeModel, Platform
from mintkit.platforms.base import PlatformModule
from mintkit.services.resolver import settle_all


class NFTs2MeModule(PlatformModule):
    """NFTs2Me stores.

    ``mintFee(1)`` is the per-token price and ``protocolFee()`` a flat fee
    charged once per transaction, so the payable value is
    ``mintFee * quantity + protocolFee``.
    """

    name = "nfts2me"

    async def _detect(self, address: str, chain_id: int) -> bool:
        # Both accessors must exist
        results = await asyncio.gather(
            self._read(address, "protocolFee()"),
            self._read(address, "mintFee(uint256)", [1]),
            return_exceptions=True,
        )
        return not any(isinstance(r, BaseException) for r in results)

    async def _sale_active(self, address: str) -> bool:
        try:
            return await self._read(address, "saleIsActive()", returns=("bool",))
        except Exception:
            return await self._read_or(
                False, address, "publicMintingEnabled()", returns=("bool",)
            )

    async def analyze(self, address: str, chain_id: int) -> ContractSnapshot:
        fields = await settle_all(
            {
                "name": (self._read(address, "name()", returns=("string",)), "Unknown"),
                "total_supply": (self._read(address, "totalSupply()"), 0),
                "max_supply": (self._read(address, "maxSupply()"), 0),
                "protocol_fee": (self._read(address, "protocolFee()"), 0),
                "mint_fee": (self._read(address, "mintFee(uint256)", [1]), 0),
                "is_active": (self._sale_active(address), False),
                "max_per_wallet": (self._read(address, "maxPerAddress()"), 0),
            }
        )

        self._logger.info(
            f"NFTs2Me {address}: mintFee={fields['mint_fee']} wei, "
            f"protocolFee={fields['protocol_fee']} wei, active={fields['is_active']}"
        )

        return ContractSnapshot(
            address=address,
            chain_id=chain_id,
            name=fields["name"],
            platform=Platform.NFTS2ME,
            mint_function_signature="mint(uint256)",
            mint_price_per_token=fields["mint_fee"],
            protocol_fee=fields["protocol_fee"],
            fee_model=FeeModel.PER_TRANSACTION,
            is_active=fields["is_active"],
            total_supply=fields["total_supply"],
            max_supply=fields["max_supply"],
            max_per_wallet=fields["max_per_wallet"],
        )
