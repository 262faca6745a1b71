"""Poll a not-yet-active sale and fire exactly one mint when it opens.

One session at a time. Polls run strictly one after another: the next
check starts only after the previous one finished and the remaining part
of the interval has elapsed, so two checks can never both see the sale
open. Stopping is cooperative; an in-flight read is allowed to finish and
its result is discarded.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

from mintkit.config import settings
from mintkit.models.contract import ContractSnapshot, ContractTarget
from mintkit.models.monitor import MonitorSession, MonitorState
from mintkit.models.transaction import MintReceipt
from mintkit.utils.errors import ConfigurationError, MonitorActiveError

logger = logging.getLogger("monitor")

Analyze = Callable[[MonitorSession], Awaitable[ContractSnapshot]]
Trigger = Callable[[ContractSnapshot, MonitorSession], Awaitable[MintReceipt]]


class ActivationMonitor:
    def __init__(
        self,
        analyze: Analyze,
        trigger: Trigger,
        min_interval: float = settings.min_poll_interval_seconds,
    ):
        self._analyze = analyze
        self._trigger = trigger
        self.min_interval = min_interval
        self._session: MonitorSession | None = None
        self._stop = asyncio.Event()
        self._task: asyncio.Task | None = None
        self.last_session: MonitorSession | None = None

    @property
    def session(self) -> MonitorSession | None:
        return self._session

    @property
    def is_running(self) -> bool:
        return self._session is not None and self._session.active

    def start(
        self,
        target: ContractTarget,
        quantity: int,
        interval: float,
        turbo: bool = False,
        price_override: int | None = None,
        platform: str | None = None,
        mint_function: str | None = None,
    ) -> MonitorSession:
        if self.is_running:
            raise MonitorActiveError(
                f"Already monitoring {self._session.target.address}; stop it first"
            )
        if interval < self.min_interval:
            raise ConfigurationError(
                f"Poll interval {interval}s is below the minimum of {self.min_interval}s"
            )
        if quantity < 1:
            raise ConfigurationError(f"Quantity must be at least 1, got {quantity}")

        session = MonitorSession(
            target=target,
            quantity=quantity,
            poll_interval_seconds=interval,
            turbo=turbo,
            price_override=price_override,
            platform=platform,
            mint_function=mint_function,
        )
        self._session = session
        self._stop = asyncio.Event()
        self._task = asyncio.create_task(self._run(session, self._stop))
        logger.info(
            f"Monitoring {target.address} on chain {target.chain_id} every {interval}s "
            f"(quantity={quantity}, turbo={turbo})"
        )
        return session

    def stop(self) -> bool:
        """Deactivate the current session. Returns False when nothing was running."""
        session = self._session
        if session is None or not session.active:
            return False
        session.active = False
        self._stop.set()
        logger.info(f"Monitoring stopped for {session.target.address}")
        return True

    async def wait(self) -> None:
        if self._task is not None:
            await self._task

    def status(self) -> dict:
        session = self._session or self.last_session
        if session is None:
            return {"state": MonitorState.IDLE.value, "session": None}
        state = session.state if session is self._session else MonitorState.IDLE
        return {"state": state.value, "session": session}

    async def _run(self, session: MonitorSession, stop: asyncio.Event) -> None:
        try:
            while session.active:
                started = time.monotonic()
                try:
                    snapshot = await self._analyze(session)
                except Exception as e:
                    session.last_error = str(e)
                    logger.warning(f"Poll of {session.target.address} failed: {e}")
                else:
                    session.checks += 1
                    if not session.active:
                        logger.debug("Stopped during poll; discarding result")
                        break
                    if snapshot.is_active:
                        await self._fire(session, snapshot)
                        break
                    logger.debug(f"Check {session.checks}: sale not active yet")

                remaining = session.poll_interval_seconds - (time.monotonic() - started)
                try:
                    await asyncio.wait_for(stop.wait(), timeout=max(0.0, remaining))
                except asyncio.TimeoutError:
                    pass
        finally:
            session.active = False
            session.state = MonitorState.IDLE
            self.last_session = session
            if self._session is session:
                self._session = None

    async def _fire(self, session: MonitorSession, snapshot: ContractSnapshot) -> None:
        # Deactivate before minting so nothing can trigger a second time
        session.active = False
        session.state = MonitorState.TRIGGERED
        logger.info(f"Sale active on {session.target.address}, minting {session.quantity}")
        try:
            session.receipt = await self._trigger(snapshot, session)
            logger.info(f"Monitor mint sent: {session.receipt.tx_hash}")
        except Exception as e:
            session.last_error = str(e)
            logger.error(f"Monitor mint failed: {e}")
