from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Sequence

from mintkit.models.contract import ContractSnapshot
from mintkit.services.resolver import with_default
from mintkit.services.rpc import EvmRpcClient
from mintkit.utils.abi import function_selector
from mintkit.utils.bytecode import contains_selector, minimal_proxy_target


def now() -> int:
    return int(time.time())


class PlatformModule(ABC):
    """One minting convention: a cheap discriminating probe plus a full read."""

    name: str = ""
    aliases: tuple[str, ...] = ()

    def __init__(self, client: EvmRpcClient):
        self._client = client
        self._logger = logging.getLogger(f"platform.{self.name}")

    def matches(self, platform_name: str) -> bool:
        wanted = platform_name.strip().lower()
        return wanted == self.name or wanted in self.aliases

    async def detect(self, address: str, chain_id: int) -> bool:
        """Never raises: any failure or malformed probe result means no match."""
        try:
            return bool(await self._detect(address, chain_id))
        except Exception as e:
            self._logger.debug(f"detect failed for {address}: {e}")
            return False

    @abstractmethod
    async def _detect(self, address: str, chain_id: int) -> bool:
        ...

    @abstractmethod
    async def analyze(self, address: str, chain_id: int) -> ContractSnapshot:
        ...

    async def _read(
        self,
        address: str,
        signature: str,
        args: Sequence[Any] = (),
        returns: Sequence[str] = ("uint256",),
    ) -> Any:
        return await self._client.read(address, signature, args, returns)

    async def _read_or(
        self,
        default: Any,
        address: str,
        signature: str,
        args: Sequence[Any] = (),
        returns: Sequence[str] = ("uint256",),
    ) -> Any:
        return await with_default(
            self._read(address, signature, args, returns), default, field=signature
        )

    async def _code(self, address: str) -> str:
        return await with_default(self._client.eth_get_code(address), "0x", field="code")

    async def pick_mint_function(
        self, address: str, candidates: Sequence[str], default: str
    ) -> str:
        """First candidate whose selector appears in the deployed bytecode."""
        code = await self._code(address)
        delegate = minimal_proxy_target(code)
        if delegate:
            code = await self._code(delegate)
        for signature in candidates:
            if contains_selector(code, function_selector(signature)):
                return signature
        return default
