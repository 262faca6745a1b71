from __future__ import annotations

from eth_utils import keccak

from mintkit.models.contract import ContractSnapshot, FeeModel, Platform
from mintkit.platforms.base import PlatformModule, now
from mintkit.services.resolver import settle_all, with_default
from mintkit.utils.address import is_zero_address
from mintkit.utils.errors import DetectionError

DEFAULT_LIST_KEY = b"\x00" * 32
PUBLIC_LIST_KEY = keccak(text="public")

# (price, reservePrice, delta, start, end, limit, maxSupply, interval,
#  unitSize, tokenAddress, isBlacklist)
INVITE_RETURNS = (
    "uint128", "uint128", "uint64", "uint32", "uint32", "uint32",
    "uint32", "uint32", "uint32", "address", "bool",
)
CONFIG_RETURNS = ("string", "address", "uint32", "uint32", "uint16", "uint16", "uint16")


class ScatterModule(PlatformModule):
    """Scatter.art Archetype collections (invite-keyed pricing)."""

    name = "scatter"
    aliases = ("archetype",)

    async def _detect(self, address: str, chain_id: int) -> bool:
        platform = await self._read(address, "platform()", returns=("address",))
        if is_zero_address(platform):
            raise DetectionError(f"platform() on {address} is the zero address")
        return True

    async def _compute_price(self, address: str) -> tuple[int, bytes]:
        """Price for one token and the list key it was computed for."""
        for key in (DEFAULT_LIST_KEY, PUBLIC_LIST_KEY):
            try:
                price = await self._read(
                    address, "computePrice(bytes32,uint256,bool)", [key, 1, False]
                )
                self._logger.info(f"Computed price for key 0x{key.hex()[:8]}..: {price}")
                return price, key
            except Exception as e:
                self._logger.debug(f"computePrice failed for key 0x{key.hex()[:8]}..: {e}")
        self._logger.warning(f"Could not compute price for any known key on {address}")
        return 0, DEFAULT_LIST_KEY

    async def analyze(self, address: str, chain_id: int) -> ContractSnapshot:
        fields = await settle_all(
            {
                "name": (self._read(address, "name()", returns=("string",)), "Unknown"),
                "total_supply": (self._read(address, "totalSupply()"), 0),
                "config": (self._read(address, "config()", returns=CONFIG_RETURNS), None),
                "priced": (self._compute_price(address), (0, DEFAULT_LIST_KEY)),
            }
        )

        max_supply = fields["config"][2] if fields["config"] else 0
        mint_price, key = fields["priced"]

        is_active = False
        max_per_wallet = None
        invite = await with_default(
            self._read(address, "invites(bytes32)", [key], returns=INVITE_RETURNS),
            None,
            field="invites",
        )
        if invite is not None:
            start, end = invite[3], invite[4]
            current = now()
            is_active = start <= current and (end == 0 or end > current)
            max_per_wallet = invite[5]
            if mint_price == 0:
                mint_price = invite[0]
            self._logger.info(
                f"Invite data: price={invite[0]}, start={start}, end={end}, active={is_active}"
            )

        return ContractSnapshot(
            address=address,
            chain_id=chain_id,
            name=fields["name"],
            platform=Platform.SCATTER,
            mint_function_signature="mint((bytes32,bytes32[]),uint256,address,bytes)",
            mint_price_per_token=mint_price,
            fee_model=FeeModel.NONE,
            is_active=is_active,
            total_supply=fields["total_supply"],
            max_supply=max_supply,
            max_per_wallet=max_per_wallet,
            invite_key="0x" + key.hex(),
        )
