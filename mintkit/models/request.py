from __future__ import annotations

from pydantic import BaseModel, Field


class MintRequest(BaseModel):
    address: str
    chain_id: int | None = Field(default=None, alias="chainId")
    quantity: int = Field(default=1, ge=1)
    # Per-token price in wei; beats whatever the contract reports
    price_wei: int | None = Field(default=None, ge=0, alias="priceWei")
    turbo: bool = False
    platform: str | None = None
    func: str | None = None

    model_config = {"populate_by_name": True}


class ExecuteRequest(MintRequest):
    wait: bool = True


class MonitorRequest(BaseModel):
    address: str
    chain_id: int | None = Field(default=None, alias="chainId")
    quantity: int = Field(default=1, ge=1)
    interval_seconds: float | None = Field(default=None, gt=0, alias="intervalSeconds")
    price_wei: int | None = Field(default=None, ge=0, alias="priceWei")
    turbo: bool = False
    platform: str | None = None
    func: str | None = None

    model_config = {"populate_by_name": True}
