from __future__ import annotations

from mintkit.config import settings
from mintkit.models.contract import ContractSnapshot, FeeModel, Platform
from mintkit.platforms.base import PlatformModule, now
from mintkit.services.resolver import settle_all, with_default
from mintkit.services.rpc import EvmRpcClient
from mintkit.utils.bytecode import contains_any_selector, minimal_proxy_target

# ERC721SeaDrop interface id
ISEADROP_TOKEN_INTERFACE = bytes.fromhex("1890fe8e")

# mintSeaDrop(address,uint256) and getAllowedSeaDrop()
SEADROP_TOKEN_SELECTORS = ["0x64869dad", "0x4f2c436d"]

PUBLIC_DROP_TYPE = "(uint80,uint48,uint48,uint16,uint16,bool)"


class SeaDropModule(PlatformModule):
    """OpenSea SeaDrop tokens.

    Sales are handled by a shared SeaDrop singleton: price, window and wallet
    limit are read from ``getPublicDrop(token)`` on the router, and the mint
    is sent to the router as ``mintPublic``.
    """

    name = "opensea"
    aliases = ("seadrop",)

    def __init__(
        self,
        client: EvmRpcClient,
        router_address: str | None = None,
    ):
        super().__init__(client)
        self.router_address = router_address or settings.seadrop_address

    async def _detect(self, address: str, chain_id: int) -> bool:
        supports = await with_default(
            self._read(
                address,
                "supportsInterface(bytes4)",
                [ISEADROP_TOKEN_INTERFACE],
                returns=("bool",),
            ),
            False,
            field="supportsInterface",
        )
        if supports is True:
            self._logger.info(f"SeaDrop detected via supportsInterface for {address}")
            return True

        seadrops = await with_default(
            self._read(address, "getSeaDrops()", returns=("address[]",)),
            (),
            field="getSeaDrops",
        )
        if seadrops:
            self._logger.info(f"SeaDrop detected via getSeaDrops() for {address}")
            return True

        code = await self._code(address)
        if contains_any_selector(code, SEADROP_TOKEN_SELECTORS):
            self._logger.info(f"SeaDrop detected via bytecode selector for {address}")
            return True

        implementation = minimal_proxy_target(code)
        if implementation:
            self._logger.info(f"Minimal proxy {address} delegates to {implementation}")
            impl_code = await self._code(implementation)
            if contains_any_selector(impl_code, SEADROP_TOKEN_SELECTORS):
                self._logger.info("SeaDrop detected via proxy implementation")
                return True

        return False

    async def analyze(self, address: str, chain_id: int) -> ContractSnapshot:
        fields = await settle_all(
            {
                "name": (self._read(address, "name()", returns=("string",)), "Unknown"),
                "total_supply": (self._read(address, "totalSupply()"), 0),
                "max_supply": (self._read(address, "maxSupply()"), 0),
                "public_drop": (
                    self._read(
                        self.router_address,
                        "getPublicDrop(address)",
                        [address],
                        returns=(PUBLIC_DROP_TYPE,),
                    ),
                    None,
                ),
            }
        )

        mint_price = 0
        max_per_wallet = 0
        is_active = False
        drop = fields["public_drop"]
        if drop is not None:
            mint_price, start_time, end_time, max_per_wallet = drop[0], drop[1], drop[2], drop[3]
            is_active = start_time <= now() < end_time
            self._logger.info(
                f"SeaDrop {address}: price={mint_price} wei, "
                f"window=[{start_time}, {end_time}), active={is_active}, "
                f"maxPerWallet={max_per_wallet}"
            )
        else:
            self._logger.warning(f"Could not fetch public drop for {address}")

        return ContractSnapshot(
            address=address,
            chain_id=chain_id,
            name=fields["name"],
            platform=Platform.OPENSEA,
            mint_function_signature="mintPublic(address,address,address,uint256)",
            mint_price_per_token=mint_price,
            fee_model=FeeModel.NONE,
            is_active=is_active,
            total_supply=fields["total_supply"],
            max_supply=fields["max_supply"],
            max_per_wallet=max_per_wallet,
            router_address=self.router_address,
        )
