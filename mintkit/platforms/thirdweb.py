from __future__ import annotations

from mintkit.models.contract import ContractSnapshot, FeeModel, Platform
from mintkit.platforms.base import PlatformModule, now
from mintkit.services.resolver import settle_all, with_default

NATIVE_CURRENCY = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"

CLAIM_SIGNATURE = (
    "claim(address,uint256,address,uint256,(bytes32[],uint256,uint256,address),bytes)"
)

# (startTimestamp, maxClaimableSupply, supplyClaimed, quantityLimitPerWallet,
#  merkleRoot, pricePerToken, currency, metadata)
CLAIM_CONDITION_TYPE = "(uint256,uint256,uint256,uint256,bytes32,uint256,address,string)"


class ThirdwebModule(PlatformModule):
    """Thirdweb NFT Drop / Edition Drop contracts driven by claim conditions."""

    name = "thirdweb"

    async def _detect(self, address: str, chain_id: int) -> bool:
        contract_type = await with_default(
            self._read(address, "contractType()", returns=("bytes32",)),
            None,
            field="contractType",
        )
        if contract_type and any(contract_type):
            label = contract_type.rstrip(b"\x00").decode(errors="replace")
            self._logger.info(f"Thirdweb {address} type {label}")
            return True
        await self._read(address, "getActiveClaimConditionId()")
        return True

    async def _claim_condition(self, address: str) -> tuple | None:
        try:
            condition_id = await self._read(address, "getActiveClaimConditionId()")
            return await self._read(
                address,
                "getClaimConditionById(uint256)",
                [condition_id],
                returns=(CLAIM_CONDITION_TYPE,),
            )
        except Exception as e:
            self._logger.warning(f"Failed to get claim condition for {address}: {e}")
            return None

    async def analyze(self, address: str, chain_id: int) -> ContractSnapshot:
        fields = await settle_all(
            {
                "name": (self._read(address, "name()", returns=("string",)), "Unknown"),
                "total_supply": (self._read(address, "totalSupply()"), 0),
                "max_supply": (self._read(address, "maxTotalSupply()"), 0),
                "condition": (self._claim_condition(address), None),
            }
        )

        mint_price = 0
        is_active = False
        max_per_wallet = None
        currency = NATIVE_CURRENCY
        condition = fields["condition"]
        if condition is not None:
            start, max_claimable, claimed, per_wallet = condition[:4]
            mint_price, currency = condition[5], condition[6]
            max_per_wallet = per_wallet
            sold_out = max_claimable > 0 and claimed >= max_claimable
            is_active = start <= now() and not sold_out

        return ContractSnapshot(
            address=address,
            chain_id=chain_id,
            name=fields["name"],
            platform=Platform.THIRDWEB,
            mint_function_signature=CLAIM_SIGNATURE,
            mint_price_per_token=mint_price,
            fee_model=FeeModel.NONE,
            is_active=is_active,
            total_supply=fields["total_supply"],
            max_supply=fields["max_supply"],
            max_per_wallet=max_per_wallet,
            currency=currency,
        )
