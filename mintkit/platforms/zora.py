from __future__ import annotations

from mintkit.models.contract import ContractSnapshot, FeeModel, Platform
from mintkit.platforms.base import PlatformModule, now
from mintkit.services.resolver import settle_all

# (publicSalePrice, maxSalePurchasePerAddress, publicSaleStart, publicSaleEnd,
#  presaleStart, presaleEnd, presaleMerkleRoot)
SALES_CONFIG_RETURNS = ("uint104", "uint32", "uint64", "uint64", "uint64", "uint64", "bytes32")

# (metadataRenderer, editionSize, royaltyBPS, fundsRecipient)
EDITION_CONFIG_RETURNS = ("address", "uint64", "uint16", "address")


class ZoraModule(PlatformModule):
    """Zora editions: per-token protocol fee on top of the sale price."""

    name = "zora"

    async def _detect(self, address: str, chain_id: int) -> bool:
        try:
            await self._read(
                address, "zoraFeeForAmount(uint256)", [1], returns=("address", "uint256")
            )
        except Exception:
            await self._read(address, "salesConfig()", returns=SALES_CONFIG_RETURNS)
        return True

    async def analyze(self, address: str, chain_id: int) -> ContractSnapshot:
        fields = await settle_all(
            {
                "name": (self._read(address, "name()", returns=("string",)), "Unknown"),
                "total_supply": (self._read(address, "totalSupply()"), 0),
                "config": (self._read(address, "config()", returns=EDITION_CONFIG_RETURNS), None),
                "sales": (self._read(address, "salesConfig()", returns=SALES_CONFIG_RETURNS), None),
                "fee": (
                    self._read(
                        address, "zoraFeeForAmount(uint256)", [1], returns=("address", "uint256")
                    ),
                    None,
                ),
            }
        )

        mint_price = 0
        is_active = False
        max_per_wallet = None
        sales = fields["sales"]
        if sales is not None:
            mint_price, max_per_wallet, start, end = sales[:4]
            current = now()
            is_active = current >= start and (end == 0 or current < end)
        else:
            self._logger.warning(f"Failed to get sales config for {address}")

        protocol_fee = fields["fee"][1] if fields["fee"] else 0
        max_supply = fields["config"][1] if fields["config"] else 0

        return ContractSnapshot(
            address=address,
            chain_id=chain_id,
            name=fields["name"],
            platform=Platform.ZORA,
            mint_function_signature="purchase(uint256)",
            mint_price_per_token=mint_price,
            protocol_fee=protocol_fee,
            fee_model=FeeModel.PER_TOKEN,
            is_active=is_active,
            total_supply=fields["total_supply"],
            max_supply=max_supply,
            max_per_wallet=max_per_wallet,
        )
