from __future__ import annotations

from mintkit.models.contract import ContractSnapshot, FeeModel, Platform
from mintkit.platforms.base import PlatformModule
from mintkit.services.resolver import settle_all


class ManifoldModule(PlatformModule):
    """Manifold claim extensions.

    Claim pricing lives per instance id, which a contract address alone does
    not identify, so only the per-token ``MINT_FEE()`` is priced here.
    """

    name = "manifold"

    async def _detect(self, address: str, chain_id: int) -> bool:
        await self._read(address, "MINT_FEE()")
        return True

    async def analyze(self, address: str, chain_id: int) -> ContractSnapshot:
        fields = await settle_all(
            {
                "name": (self._read(address, "name()", returns=("string",)), "Unknown"),
                "total_supply": (self._read(address, "totalSupply()"), 0),
                "mint_fee": (self._read(address, "MINT_FEE()"), 0),
            }
        )

        return ContractSnapshot(
            address=address,
            chain_id=chain_id,
            name=fields["name"],
            platform=Platform.MANIFOLD,
            mint_function_signature="mint(address,uint256,uint32,uint32[],bytes32[][],address)",
            mint_price_per_token=0,
            protocol_fee=fields["mint_fee"],
            fee_model=FeeModel.PER_TOKEN,
            is_active=True,
            total_supply=fields["total_supply"],
            max_supply=0,
        )
