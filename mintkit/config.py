from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Chain endpoint
    rpc_url: str = "https://eth.llamarpc.com"
    chain_id: int = 1
    rpc_timeout_seconds: float = 10.0

    # Signer (hex private key, empty = read-only mode)
    private_key: str = ""

    # Monitor
    default_poll_interval_seconds: float = 2.0
    min_poll_interval_seconds: float = 0.25

    # Gas
    turbo_priority_multiplier: int = 10
    turbo_gas_limit: int = 500_000
    fallback_gas_limit: int = 300_000
    gas_limit_buffer_percent: int = 20
    default_max_fee_per_gas: int = 50_000_000_000
    default_max_priority_fee_per_gas: int = 1_500_000_000
    # maxFeePerGas = baseFee * multiplier / 100 + priority
    base_fee_multiplier_percent: int = 120

    # Receipts
    receipt_timeout_seconds: float = 120.0
    receipt_poll_seconds: float = 1.0

    # SeaDrop singleton (same address on every supported chain)
    seadrop_address: str = "0x00005EA00Ac477B1030CE78506496e8C2dE24bf5"
    opensea_fee_recipient: str = "0x0000a26b00c1F0DF003000390027140000fAa719"

    # Server
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
