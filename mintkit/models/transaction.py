from __future__ import annotations

from pydantic import BaseModel


class FeeSettings(BaseModel):
    max_fee_per_gas: int
    max_priority_fee_per_gas: int

    model_config = {"frozen": True}


class FeeQuote(BaseModel):
    fees: FeeSettings
    turbo: bool = False
    # Turbo trades pre-flight validation for latency
    skip_simulation: bool = False
    gas_limit: int | None = None


class PreparedTransaction(BaseModel):
    to: str
    data: str
    value: int
    gas_limit: int
    max_fee_per_gas: int
    max_priority_fee_per_gas: int
    simulated: bool = False

    model_config = {"frozen": True}

    def to_tx_params(self) -> dict:
        return {
            "to": self.to,
            "data": self.data,
            "value": self.value,
            "gas": self.gas_limit,
            "maxFeePerGas": self.max_fee_per_gas,
            "maxPriorityFeePerGas": self.max_priority_fee_per_gas,
        }


class MintReceipt(BaseModel):
    tx_hash: str
    status: str = "pending"  # pending, success, reverted
    block_number: int | None = None
    gas_used: int | None = None
