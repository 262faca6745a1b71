"""Reduce several candidate reads of one logical field to a single value.

Contracts expose the same concept under different accessor names
(``cost()``, ``price()``, ``mintPrice()``...). Two reductions are used:

* first-success-wins: all candidates race, the first read that succeeds
  wins, the rest are cancelled; if every candidate fails the documented
  default is returned.
* all-settle-with-default: all reads run concurrently and each one falls
  back to its own default, so a missing field never aborts the group.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Iterable, TypeVar

logger = logging.getLogger("resolver")

T = TypeVar("T")


async def first_success(
    reads: Iterable[Awaitable[T]], default: T, field: str = "field"
) -> T:
    tasks = [asyncio.ensure_future(r) for r in reads]
    if not tasks:
        return default
    try:
        for next_done in asyncio.as_completed(tasks):
            try:
                return await next_done
            except Exception as e:
                logger.debug(f"{field} candidate failed: {e}")
        logger.debug(f"{field}: every candidate failed, using default {default!r}")
        return default
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()


async def with_default(read: Awaitable[T], default: T, field: str = "field") -> T:
    try:
        return await read
    except Exception as e:
        logger.debug(f"{field} unreadable, using default {default!r}: {e}")
        return default


async def settle_all(reads: dict[str, tuple[Awaitable[Any], Any]]) -> dict[str, Any]:
    names = list(reads)
    values = await asyncio.gather(
        *(with_default(read, default, name) for name, (read, default) in reads.items())
    )
    return dict(zip(names, values))


def compose_activity(paused: bool, is_active: bool, sale_active: bool) -> bool:
    """Unreadable inputs should arrive as paused=False, active=True, saleActive=True."""
    return (not paused) and bool(is_active) and bool(sale_active)


def effective_wallet_limit(max_per_wallet: int, wallet_limit: int) -> int:
    return max_per_wallet if max_per_wallet > 0 else wallet_limit
