from __future__ import annotations

import logging

from eth_abi import decode

from mintkit.models.contract import ContractSnapshot
from mintkit.utils.abi import hex_to_bytes

logger = logging.getLogger("revert")

ERROR_STRING_SELECTOR = "0x08c379a0"
PANIC_SELECTOR = "0x4e487b71"

# Custom errors commonly raised by NFT sale contracts
KNOWN_ERRORS: dict[str, str] = {
    "0xc288bf8f": "MintNotActive() - The mint is not currently active",
    "0x3c55b53b": "SaleNotStarted() - Sale has not started yet",
    "0x6f7eac26": "MaxSupplyReached() - No more tokens available",
    "0x8e4a23d6": "ExceedsWalletLimit() - You have reached the max per wallet",
    "0xb1baf4f3": "InsufficientPayment() - Not enough ETH sent",
    "0x21d5efb2": "InvalidMintAmount() - Invalid quantity",
    "0x2c5211c6": "InvalidProof() - Allowlist proof invalid",
    "0xcd786059": "InvalidPrice() - Incorrect price sent",
    "0x646cf558": "Paused() - Contract is paused",
    "0xa1d1e8d6": "NotWhitelisted() - Not on allowlist",
}

PANIC_CODES: dict[int, str] = {
    0x01: "assertion failed",
    0x11: "arithmetic overflow or underflow",
    0x12: "division by zero",
    0x21: "invalid enum value",
    0x32: "array index out of bounds",
    0x41: "out of memory",
}


def decode_revert(data: str | None, message: str | None = None) -> tuple[str, str | None]:
    """Return (reason, selector) for raw revert bytes.

    Without a payload the node's own message is used, or "Execution reverted".
    """
    if not data or len(data) < 10:
        return (message or "Execution reverted"), None

    selector = data[:10].lower()
    if selector in KNOWN_ERRORS:
        return KNOWN_ERRORS[selector], selector

    try:
        payload = hex_to_bytes(data)[4:]
    except ValueError as e:
        logger.debug(f"Revert data is not valid hex: {e}")
        return f"Custom Error: {selector} (Check contract source for meaning)", selector

    if selector == ERROR_STRING_SELECTOR:
        try:
            return decode(["string"], payload)[0], selector
        except Exception as e:
            logger.debug(f"Malformed Error(string) payload: {e}")
    elif selector == PANIC_SELECTOR:
        try:
            code = decode(["uint256"], payload)[0]
            return f"Panic(0x{code:02x}): {PANIC_CODES.get(code, 'unknown panic code')}", selector
        except Exception as e:
            logger.debug(f"Malformed Panic payload: {e}")

    return f"Custom Error: {selector} (Check contract source for meaning)", selector


def advisory_hints(snapshot: ContractSnapshot, price_per_token: int) -> list[str]:
    hints = []
    if price_per_token == 0:
        hints.append("Price is 0 ETH - verify this is correct or pass an explicit price")
    if not snapshot.is_active:
        hints.append("Contract shows mint may not be active")
    return hints
