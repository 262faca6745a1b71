from __future__ import annotations

from mintkit.models.contract import ContractSnapshot, FeeModel, Platform
from mintkit.platforms.base import PlatformModule, now
from mintkit.services.resolver import first_success, settle_all, with_default

PRICE_ACCESSORS = ["getAuctionPrice()", "currentPrice()"]

MINT_CANDIDATES = ["mintDutch(uint256)", "auctionMint(uint256)"]

# (startPrice, endPrice, startTime, endTime)
AUCTION_CONFIG_RETURNS = ("uint256", "uint256", "uint256", "uint256")


def decayed_price(start_price: int, end_price: int, start: int, end: int, at: int) -> int:
    """Linear decay from start_price to end_price over [start, end]."""
    if at <= start or end <= start:
        return start_price
    if at >= end:
        return end_price
    return start_price - (start_price - end_price) * (at - start) // (end - start)


class DutchAuctionModule(PlatformModule):
    """WCNFT-style Dutch auction drops."""

    name = "dutchauction"
    aliases = ("dutch",)

    async def _detect(self, address: str, chain_id: int) -> bool:
        try:
            await self._read(address, "getAuctionPrice()")
        except Exception:
            await self._read(address, "currentPrice()")
        return True

    async def _price(self, address: str) -> int:
        price = await first_success(
            (self._read(address, fn) for fn in PRICE_ACCESSORS), 0, field="auction price"
        )
        if price:
            return price

        config = await with_default(
            self._read(address, "dutchAuctionConfig()", returns=AUCTION_CONFIG_RETURNS),
            None,
            field="dutchAuctionConfig",
        )
        if config is None:
            self._logger.warning(f"Could not get current auction price for {address}")
            return 0
        return decayed_price(*config, at=now())

    async def analyze(self, address: str, chain_id: int) -> ContractSnapshot:
        fields = await settle_all(
            {
                "name": (self._read(address, "name()", returns=("string",)), "Unknown"),
                "total_supply": (self._read(address, "totalSupply()"), 0),
                "max_supply": (
                    first_success(
                        (self._read(address, fn) for fn in ("MAX_SUPPLY()", "maxSupply()")),
                        0,
                        field="max supply",
                    ),
                    0,
                ),
                "max_per_tx": (
                    first_success(
                        (
                            self._read(address, fn)
                            for fn in ("MAX_TOKENS_PER_PURCHASE()", "maxPerTransaction()")
                        ),
                        None,
                        field="max per transaction",
                    ),
                    None,
                ),
                "price": (self._price(address), 0),
                "auction_active": (
                    self._read(address, "auctionActive()", returns=("bool",)),
                    None,
                ),
                "mint_function": (
                    self.pick_mint_function(address, MINT_CANDIDATES, "mintDutch(uint256)"),
                    "mintDutch(uint256)",
                ),
            }
        )

        price = fields["price"]
        is_active = fields["auction_active"]
        if is_active is None:
            # No explicit flag: a live price means the auction is running
            is_active = price > 0

        return ContractSnapshot(
            address=address,
            chain_id=chain_id,
            name=fields["name"],
            platform=Platform.DUTCH_AUCTION,
            mint_function_signature=fields["mint_function"],
            mint_price_per_token=price,
            fee_model=FeeModel.NONE,
            is_active=is_active,
            total_supply=fields["total_supply"],
            max_supply=fields["max_supply"],
            max_per_wallet=fields["max_per_tx"],
        )
