from __future__ import annotations

import pytest

from mintkit.services.gas import GasStrategy

GWEI = 1_000_000_000


class TestNormalQuote:
    @pytest.mark.asyncio
    async def test_uses_estimate_unmodified(self, chain):
        chain.fee_estimate.return_value = {
            "max_fee_per_gas": 30 * GWEI,
            "max_priority_fee_per_gas": 2 * GWEI,
        }
        quote = await GasStrategy(chain).quote()

        assert quote.fees.max_fee_per_gas == 30 * GWEI
        assert quote.fees.max_priority_fee_per_gas == 2 * GWEI
        assert quote.turbo is False
        assert quote.skip_simulation is False
        assert quote.gas_limit is None

    @pytest.mark.asyncio
    async def test_missing_components_use_defaults(self, chain):
        chain.fee_estimate.return_value = {"max_fee_per_gas": None, "max_priority_fee_per_gas": None}
        quote = await GasStrategy(chain).quote()

        assert quote.fees.max_fee_per_gas == 50 * GWEI
        assert quote.fees.max_priority_fee_per_gas == 1_500_000_000


class TestTurboQuote:
    @pytest.mark.asyncio
    async def test_priority_times_ten(self, chain):
        chain.fee_estimate.return_value = {
            "max_fee_per_gas": 30 * GWEI,
            "max_priority_fee_per_gas": 2 * GWEI,
        }
        quote = await GasStrategy(chain).quote(turbo=True)

        assert quote.fees.max_priority_fee_per_gas == 20 * GWEI
        # Base component (28 gwei) is kept under the new tip
        assert quote.fees.max_fee_per_gas == 48 * GWEI
        assert quote.skip_simulation is True
        assert quote.gas_limit == 500_000
        assert quote.turbo is True

    @pytest.mark.asyncio
    async def test_max_fee_always_covers_tip(self, chain):
        chain.fee_estimate.return_value = {"max_fee_per_gas": None, "max_priority_fee_per_gas": None}
        quote = await GasStrategy(chain).quote(turbo=True)
        assert quote.fees.max_fee_per_gas >= quote.fees.max_priority_fee_per_gas

    @pytest.mark.asyncio
    async def test_custom_multiplier(self, chain):
        chain.fee_estimate.return_value = {"max_fee_per_gas": 10, "max_priority_fee_per_gas": 1}
        quote = await GasStrategy(chain, turbo_priority_multiplier=3).quote(turbo=True)
        assert quote.fees.max_priority_fee_per_gas == 3
        assert quote.fees.max_fee_per_gas == 12
