from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from mintkit.models.contract import ContractSnapshot
from mintkit.models.monitor import MonitorSession
from mintkit.models.request import ExecuteRequest, MintRequest, MonitorRequest
from mintkit.models.transaction import FeeQuote, MintReceipt, PreparedTransaction
from mintkit.services.context import MintContext
from mintkit.utils.address import normalize_address, validate_evm_address
from mintkit.utils.errors import (
    ChainUnavailableError,
    ConfigurationError,
    ExecutionError,
    MintKitError,
    MonitorActiveError,
    ReceiptRevertError,
    SignerUnavailableError,
    SimulationError,
    error_response,
)

logger = logging.getLogger("routes.mint")

router = APIRouter(prefix="/v1")

# Checked in order, so subclasses come before their bases
_STATUS_BY_ERROR: list[tuple[type[MintKitError], int]] = [
    (MonitorActiveError, 409),
    (ConfigurationError, 400),
    (SimulationError, 422),
    (ReceiptRevertError, 409),
    (SignerUnavailableError, 503),
    (ExecutionError, 502),
    (ChainUnavailableError, 502),
]


def get_context(request: Request) -> MintContext:
    return request.app.state.context


def _error(e: MintKitError, body: dict | None = None):
    status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(e, cls)), 500)
    logger.warning(f"{status} {e.__class__.__name__}: {e}")
    return error_response(status, str(e), received_body=body)


def _wei(value: int | None) -> str | None:
    return None if value is None else str(value)


def snapshot_json(snapshot: ContractSnapshot) -> dict:
    data = snapshot.model_dump(mode="json")
    for key in ("mint_price_per_token", "protocol_fee", "creator_fee"):
        data[key] = _wei(data[key])
    data["total_value_one"] = _wei(snapshot.total_value(1))
    return data


def quote_json(quote: FeeQuote) -> dict:
    data = quote.model_dump(mode="json")
    data["fees"] = {k: _wei(v) for k, v in data["fees"].items()}
    return data


def transaction_json(tx: PreparedTransaction) -> dict:
    data = tx.model_dump(mode="json")
    for key in ("value", "max_fee_per_gas", "max_priority_fee_per_gas"):
        data[key] = _wei(data[key])
    return data


def receipt_json(receipt: MintReceipt) -> dict:
    return receipt.model_dump(mode="json")


def session_json(session: MonitorSession | None) -> dict | None:
    if session is None:
        return None
    data = session.model_dump(mode="json")
    data["price_override"] = _wei(session.price_override)
    return data


def _checked_address(address: str) -> str | None:
    address = address.strip()
    if not validate_evm_address(address):
        return None
    return normalize_address(address)


@router.get("/platforms")
async def list_platforms(ctx: MintContext = Depends(get_context)):
    return {"platforms": ctx.registry.platforms + ["generic"]}


@router.get("/contracts/{address}")
async def analyze_contract(
    address: str,
    chain_id: int | None = None,
    platform: str | None = None,
    func: str | None = None,
    ctx: MintContext = Depends(get_context),
):
    checked = _checked_address(address)
    if checked is None:
        return error_response(400, f"Invalid EVM address: '{address}'")
    try:
        target = ctx.target(checked, chain_id)
        snapshot = await ctx.analyze(target, platform=platform, mint_function=func)
    except MintKitError as e:
        return _error(e)
    return snapshot_json(snapshot)


@router.get("/gas")
async def gas_quote(turbo: bool = False, ctx: MintContext = Depends(get_context)):
    try:
        quote = await ctx.quote(turbo=turbo)
    except MintKitError as e:
        return _error(e)
    return quote_json(quote)


@router.post("/mint/prepare")
async def prepare_mint(body: MintRequest, ctx: MintContext = Depends(get_context)):
    raw = body.model_dump(by_alias=True)
    checked = _checked_address(body.address)
    if checked is None:
        return error_response(400, f"Invalid EVM address: '{body.address}'", received_body=raw)
    try:
        target = ctx.target(checked, body.chain_id)
        snapshot = await ctx.analyze(target, platform=body.platform, mint_function=body.func)
        tx = await ctx.prepare(
            snapshot, body.quantity, turbo=body.turbo, price_override=body.price_wei
        )
    except MintKitError as e:
        return _error(e, raw)
    logger.info(f"Prepared mint for {checked}: value={tx.value} gas={tx.gas_limit}")
    return {"contract": snapshot_json(snapshot), "transaction": transaction_json(tx)}


@router.post("/mint/execute")
async def execute_mint(body: ExecuteRequest, ctx: MintContext = Depends(get_context)):
    raw = body.model_dump(by_alias=True)
    checked = _checked_address(body.address)
    if checked is None:
        return error_response(400, f"Invalid EVM address: '{body.address}'", received_body=raw)
    try:
        target = ctx.target(checked, body.chain_id)
        receipt = await ctx.execute(
            target,
            body.quantity,
            turbo=body.turbo,
            price_override=body.price_wei,
            platform=body.platform,
            mint_function=body.func,
            wait=body.wait,
        )
    except MintKitError as e:
        return _error(e, raw)
    return receipt_json(receipt)


@router.post("/monitor/start")
async def start_monitor(body: MonitorRequest, ctx: MintContext = Depends(get_context)):
    raw = body.model_dump(by_alias=True)
    checked = _checked_address(body.address)
    if checked is None:
        return error_response(400, f"Invalid EVM address: '{body.address}'", received_body=raw)
    try:
        target = ctx.target(checked, body.chain_id)
        session = ctx.start_monitor(
            target,
            body.quantity,
            interval=body.interval_seconds,
            turbo=body.turbo,
            price_override=body.price_wei,
            platform=body.platform,
            mint_function=body.func,
        )
    except MintKitError as e:
        return _error(e, raw)
    return {"started": True, "session": session_json(session)}


@router.post("/monitor/stop")
async def stop_monitor(ctx: MintContext = Depends(get_context)):
    return {"stopped": ctx.stop_monitor()}


@router.get("/monitor")
async def monitor_status(ctx: MintContext = Depends(get_context)):
    status = ctx.monitor.status()
    return {"state": status["state"], "session": session_json(status["session"])}
