from __future__ import annotations

import logging

from mintkit.config import Settings, settings as default_settings
from mintkit.models.contract import ContractSnapshot, ContractTarget
from mintkit.models.monitor import MonitorSession
from mintkit.models.transaction import FeeQuote, MintReceipt, PreparedTransaction
from mintkit.services.builder import TransactionBuilder
from mintkit.services.executor import MintExecutor
from mintkit.services.gas import GasStrategy
from mintkit.services.monitor import ActivationMonitor
from mintkit.services.registry import PlatformRegistry, default_registry
from mintkit.services.rpc import EvmRpcClient
from mintkit.utils.errors import ConfigurationError, SignerUnavailableError

logger = logging.getLogger("context")


class MintContext:
    """Everything one caller needs to analyze, prepare and mint.

    Created explicitly by the caller and closed by it; nothing here is
    shared between contexts.
    """

    def __init__(
        self,
        client: EvmRpcClient,
        registry: PlatformRegistry,
        gas: GasStrategy,
        builder: TransactionBuilder,
        executor: MintExecutor | None = None,
        poll_interval: float = default_settings.default_poll_interval_seconds,
        min_poll_interval: float = default_settings.min_poll_interval_seconds,
    ):
        self.client = client
        self.registry = registry
        self.gas = gas
        self.builder = builder
        self.executor = executor
        self.poll_interval = poll_interval
        self.monitor = ActivationMonitor(
            self._analyze_session, self._mint_snapshot, min_interval=min_poll_interval
        )

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> MintContext:
        config = config or default_settings
        client = EvmRpcClient(
            config.rpc_url, chain_id=config.chain_id, timeout=config.rpc_timeout_seconds
        )
        executor = None
        if config.private_key:
            executor = MintExecutor.from_private_key(
                client,
                config.private_key,
                config.chain_id,
                receipt_timeout=config.receipt_timeout_seconds,
                receipt_poll_interval=config.receipt_poll_seconds,
            )
            logger.info(f"Signer loaded: {executor.address}")
        else:
            logger.info("No private key configured; running read-only")

        return cls(
            client=client,
            registry=default_registry(client, seadrop_address=config.seadrop_address),
            gas=GasStrategy(
                client,
                turbo_priority_multiplier=config.turbo_priority_multiplier,
                turbo_gas_limit=config.turbo_gas_limit,
                default_max_fee_per_gas=config.default_max_fee_per_gas,
                default_max_priority_fee_per_gas=config.default_max_priority_fee_per_gas,
                base_fee_multiplier_percent=config.base_fee_multiplier_percent,
            ),
            builder=TransactionBuilder(
                client,
                sender=executor.address if executor else None,
                fee_recipient=config.opensea_fee_recipient,
                fallback_gas_limit=config.fallback_gas_limit,
                turbo_gas_limit=config.turbo_gas_limit,
                gas_limit_buffer_percent=config.gas_limit_buffer_percent,
            ),
            executor=executor,
            poll_interval=config.default_poll_interval_seconds,
            min_poll_interval=config.min_poll_interval_seconds,
        )

    @property
    def chain_id(self) -> int | None:
        return self.client.chain_id

    @property
    def can_sign(self) -> bool:
        return self.executor is not None

    async def close(self) -> None:
        self.monitor.stop()
        await self.monitor.wait()
        await self.client.close()

    def target(self, address: str, chain_id: int | None = None) -> ContractTarget:
        if chain_id is None:
            chain_id = self.chain_id
        elif self.chain_id is not None and chain_id != self.chain_id:
            raise ConfigurationError(
                f"Chain {chain_id} requested but the endpoint is configured for {self.chain_id}"
            )
        return ContractTarget(address=address, chain_id=chain_id or 1)

    async def analyze(
        self,
        target: ContractTarget,
        platform: str | None = None,
        mint_function: str | None = None,
    ) -> ContractSnapshot:
        return await self.registry.analyze(
            target.address, target.chain_id, forced_platform=platform, mint_function=mint_function
        )

    async def quote(self, turbo: bool = False) -> FeeQuote:
        return await self.gas.quote(turbo=turbo)

    async def prepare(
        self,
        snapshot: ContractSnapshot,
        quantity: int,
        turbo: bool = False,
        price_override: int | None = None,
    ) -> PreparedTransaction:
        quote = await self.quote(turbo=turbo)
        return await self.builder.prepare(
            snapshot,
            quantity,
            quote.fees,
            price_override=price_override,
            skip_simulation=quote.skip_simulation,
            gas_limit=quote.gas_limit,
        )

    async def execute(
        self,
        target: ContractTarget,
        quantity: int,
        turbo: bool = False,
        price_override: int | None = None,
        platform: str | None = None,
        mint_function: str | None = None,
        wait: bool = True,
    ) -> MintReceipt:
        executor = self._require_executor()
        snapshot = await self.analyze(target, platform=platform, mint_function=mint_function)
        tx = await self.prepare(snapshot, quantity, turbo=turbo, price_override=price_override)
        return await executor.submit(tx, wait=wait)

    def start_monitor(
        self,
        target: ContractTarget,
        quantity: int,
        interval: float | None = None,
        turbo: bool = False,
        price_override: int | None = None,
        platform: str | None = None,
        mint_function: str | None = None,
    ) -> MonitorSession:
        self._require_executor()
        if platform and platform.strip().lower() != "generic" and not self.registry.find(platform):
            raise ConfigurationError(
                f"Unknown platform '{platform}'. Known: {self.registry.platforms + ['generic']}"
            )
        return self.monitor.start(
            target,
            quantity,
            interval if interval is not None else self.poll_interval,
            turbo=turbo,
            price_override=price_override,
            platform=platform,
            mint_function=mint_function,
        )

    def stop_monitor(self) -> bool:
        return self.monitor.stop()

    def _require_executor(self) -> MintExecutor:
        if self.executor is None:
            raise SignerUnavailableError("No signer configured: set PRIVATE_KEY to send transactions")
        return self.executor

    async def _analyze_session(self, session: MonitorSession) -> ContractSnapshot:
        return await self.analyze(
            session.target, platform=session.platform, mint_function=session.mint_function
        )

    async def _mint_snapshot(
        self, snapshot: ContractSnapshot, session: MonitorSession
    ) -> MintReceipt:
        executor = self._require_executor()
        tx = await self.prepare(
            snapshot,
            session.quantity,
            turbo=session.turbo,
            price_override=session.price_override,
        )
        return await executor.submit(tx, wait=False)
