from __future__ import annotations

import logging

import httpx

from mintkit.models.contract import ContractSnapshot
from mintkit.platforms.base import PlatformModule
from mintkit.platforms.dutch_auction import DutchAuctionModule
from mintkit.platforms.generic import GenericAnalyzer
from mintkit.platforms.magiceden import MagicEdenModule
from mintkit.platforms.manifold import ManifoldModule
from mintkit.platforms.nfts2me import NFTs2MeModule
from mintkit.platforms.scatter import ScatterModule
from mintkit.platforms.seadrop import SeaDropModule
from mintkit.platforms.thirdweb import ThirdwebModule
from mintkit.platforms.zora import ZoraModule
from mintkit.services.rpc import EvmRpcClient, RpcError
from mintkit.utils.bytecode import is_empty_code
from mintkit.utils.errors import ChainUnavailableError, ConfigurationError

logger = logging.getLogger("registry")


class PlatformRegistry:
    """Ordered platform modules; the first whose probe matches analyzes."""

    def __init__(self, client: EvmRpcClient, modules: list[PlatformModule] | None = None):
        self._client = client
        self._modules: list[PlatformModule] = []
        for module in modules or []:
            self.register(module)

    def register(self, module: PlatformModule) -> None:
        self._modules.append(module)
        logger.debug(f"Registered platform module: {module.name}")

    @property
    def platforms(self) -> list[str]:
        return [m.name for m in self._modules]

    def find(self, platform_name: str) -> PlatformModule | None:
        for module in self._modules:
            if module.matches(platform_name):
                return module
        return None

    async def _ensure_reachable(self, address: str) -> None:
        try:
            code = await self._client.eth_get_code(address)
        except (httpx.HTTPError, RpcError) as e:
            raise ChainUnavailableError(f"Chain endpoint unreachable: {e}") from e
        if is_empty_code(code):
            logger.warning(f"No contract code at {address}; results will be defaults")

    async def analyze(
        self,
        address: str,
        chain_id: int,
        forced_platform: str | None = None,
        mint_function: str | None = None,
    ) -> ContractSnapshot:
        await self._ensure_reachable(address)

        if forced_platform:
            wanted = forced_platform.strip().lower()
            if wanted == GenericAnalyzer.name:
                logger.info(f"Using forced generic analysis for {address}")
                return await GenericAnalyzer(self._client, mint_function).analyze(
                    address, chain_id
                )
            module = self.find(wanted)
            if module is None:
                raise ConfigurationError(
                    f"Unknown platform '{forced_platform}'. Known: {self.platforms + ['generic']}"
                )
            logger.info(f"Using forced platform {module.name} for {address}")
            return await module.analyze(address, chain_id)

        for module in self._modules:
            try:
                matched = await module.detect(address, chain_id)
            except Exception as e:
                logger.debug(f"Module {module.name} detection failed: {e}")
                continue
            if matched:
                logger.info(f"Detected platform {module.name} for {address}")
                return await module.analyze(address, chain_id)

        logger.info(f"No specific platform detected for {address}, using generic analyzer")
        return await GenericAnalyzer(self._client, mint_function).analyze(address, chain_id)


def default_registry(client: EvmRpcClient, seadrop_address: str | None = None) -> PlatformRegistry:
    return PlatformRegistry(
        client,
        [
            NFTs2MeModule(client),
            SeaDropModule(client, router_address=seadrop_address),
            MagicEdenModule(client),
            ScatterModule(client),
            DutchAuctionModule(client),
            ThirdwebModule(client),
            ZoraModule(client),
            ManifoldModule(client),
        ],
    )
