from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from mintkit.models.contract import ContractTarget
from mintkit.models.transaction import MintReceipt


class MonitorState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"
    TRIGGERED = "triggered"


class MonitorSession(BaseModel):
    target: ContractTarget
    quantity: int
    poll_interval_seconds: float
    turbo: bool = False
    price_override: int | None = None
    # Carried into every poll so a forced module or mint function sticks
    platform: str | None = None
    mint_function: str | None = None
    active: bool = True
    state: MonitorState = MonitorState.POLLING
    checks: int = 0
    last_error: str | None = None
    receipt: MintReceipt | None = None
