from __future__ import annotations

import asyncio

import pytest

from mintkit.services.resolver import (
    compose_activity,
    effective_wallet_limit,
    first_success,
    settle_all,
    with_default,
)
from mintkit.utils.errors import FieldReadError


async def _value_after(delay: float, value):
    await asyncio.sleep(delay)
    return value


async def _fail_after(delay: float):
    await asyncio.sleep(delay)
    raise FieldReadError("reverted")


class TestFirstSuccess:
    @pytest.mark.asyncio
    async def test_returns_earliest_success(self):
        result = await first_success(
            [_value_after(0.05, 1), _value_after(0.01, 2), _value_after(0.03, 3)], 0
        )
        assert result == 2

    @pytest.mark.asyncio
    async def test_skips_failures(self):
        result = await first_success([_fail_after(0.0), _value_after(0.02, 7)], 0)
        assert result == 7

    @pytest.mark.asyncio
    async def test_all_fail_returns_default(self):
        result = await first_success([_fail_after(0.0), _fail_after(0.01)], 0)
        assert result == 0

    @pytest.mark.asyncio
    async def test_no_candidates_returns_default(self):
        assert await first_success([], 42) == 42

    @pytest.mark.asyncio
    async def test_cancels_slower_candidates(self):
        finished = []

        async def slow():
            await asyncio.sleep(1)
            finished.append("slow")
            return 99

        result = await first_success([_value_after(0.0, 5), slow()], 0)
        await asyncio.sleep(0.01)
        assert result == 5
        assert finished == []


class TestWithDefault:
    @pytest.mark.asyncio
    async def test_value_passes_through(self):
        assert await with_default(_value_after(0, "x"), "d") == "x"

    @pytest.mark.asyncio
    async def test_failure_defaults(self):
        assert await with_default(_fail_after(0), "d") == "d"


class TestSettleAll:
    @pytest.mark.asyncio
    async def test_each_field_defaults_independently(self):
        fields = await settle_all(
            {
                "name": (_value_after(0, "Drop"), "Unknown"),
                "supply": (_fail_after(0), 0),
                "paused": (_fail_after(0), False),
            }
        )
        assert fields == {"name": "Drop", "supply": 0, "paused": False}


class TestActivity:
    def test_all_defaults_mean_active(self):
        assert compose_activity(False, True, True) is True

    def test_paused_wins(self):
        assert compose_activity(True, True, True) is False

    def test_sale_inactive(self):
        assert compose_activity(False, True, False) is False


class TestWalletLimit:
    def test_prefers_max_per_wallet(self):
        assert effective_wallet_limit(5, 3) == 5

    def test_falls_back_to_wallet_limit(self):
        assert effective_wallet_limit(0, 3) == 3

    def test_both_missing(self):
        assert effective_wallet_limit(0, 0) == 0
