from __future__ import annotations

import logging

from mintkit.config import settings
from mintkit.models.transaction import FeeQuote, FeeSettings
from mintkit.services.rpc import EvmRpcClient

logger = logging.getLogger("gas")


class GasStrategy:
    """EIP-1559 fee quotes, with a turbo mode that pays for latency."""

    def __init__(
        self,
        client: EvmRpcClient,
        turbo_priority_multiplier: int = settings.turbo_priority_multiplier,
        turbo_gas_limit: int = settings.turbo_gas_limit,
        default_max_fee_per_gas: int = settings.default_max_fee_per_gas,
        default_max_priority_fee_per_gas: int = settings.default_max_priority_fee_per_gas,
        base_fee_multiplier_percent: int = settings.base_fee_multiplier_percent,
    ):
        self._client = client
        self.turbo_priority_multiplier = turbo_priority_multiplier
        self.turbo_gas_limit = turbo_gas_limit
        self.default_max_fee_per_gas = default_max_fee_per_gas
        self.default_max_priority_fee_per_gas = default_max_priority_fee_per_gas
        self.base_fee_multiplier_percent = base_fee_multiplier_percent

    async def quote(self, turbo: bool = False) -> FeeQuote:
        estimate = await self._client.fee_estimate(self.base_fee_multiplier_percent)
        max_fee = estimate.get("max_fee_per_gas")
        priority = estimate.get("max_priority_fee_per_gas")
        if max_fee is None:
            max_fee = self.default_max_fee_per_gas
            logger.warning(f"No max fee estimate, using default {max_fee} wei")
        if priority is None:
            priority = self.default_max_priority_fee_per_gas
        # The cap must always cover the tip
        max_fee = max(max_fee, priority)

        if not turbo:
            return FeeQuote(
                fees=FeeSettings(max_fee_per_gas=max_fee, max_priority_fee_per_gas=priority)
            )

        base_component = max_fee - priority
        boosted = priority * self.turbo_priority_multiplier
        logger.info(
            f"Turbo: priority {priority} -> {boosted} wei, gas limit {self.turbo_gas_limit}"
        )
        return FeeQuote(
            fees=FeeSettings(
                max_fee_per_gas=base_component + boosted,
                max_priority_fee_per_gas=boosted,
            ),
            turbo=True,
            skip_simulation=True,
            gas_limit=self.turbo_gas_limit,
        )
