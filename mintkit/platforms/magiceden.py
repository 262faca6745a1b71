from __future__ import annotations

from mintkit.models.contract import ContractSnapshot, FeeModel, Platform
from mintkit.platforms.base import PlatformModule
from mintkit.services.resolver import first_success, settle_all

PRICE_ACCESSORS = ["cost()", "price()", "mintPrice()"]

MINT_CANDIDATES = ["mint(uint256)", "publicMint(uint256)", "purchase(uint256)"]


class MagicEdenModule(PlatformModule):
    """Custom Magic Eden launchpad contracts that do not go through SeaDrop."""

    name = "magiceden"

    async def _detect(self, address: str, chain_id: int) -> bool:
        await self._read(address, "provenanceHash()", returns=("string",))
        return True

    async def analyze(self, address: str, chain_id: int) -> ContractSnapshot:
        fields = await settle_all(
            {
                "name": (self._read(address, "name()", returns=("string",)), "Unknown"),
                "total_supply": (self._read(address, "totalSupply()"), 0),
                "max_supply": (self._read(address, "maxSupply()"), 0),
                "price": (
                    first_success(
                        (self._read(address, fn) for fn in PRICE_ACCESSORS),
                        0,
                        field="price",
                    ),
                    0,
                ),
                "sale_active": (self._read(address, "saleActive()", returns=("bool",)), True),
                "mint_function": (
                    self.pick_mint_function(address, MINT_CANDIDATES, "mint(uint256)"),
                    "mint(uint256)",
                ),
            }
        )

        return ContractSnapshot(
            address=address,
            chain_id=chain_id,
            name=fields["name"],
            platform=Platform.MAGICEDEN,
            mint_function_signature=fields["mint_function"],
            mint_price_per_token=fields["price"],
            fee_model=FeeModel.NONE,
            is_active=fields["sale_active"],
            total_supply=fields["total_supply"],
            max_supply=fields["max_supply"],
        )
