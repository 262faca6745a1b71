"""Byte-pattern checks on deployed bytecode.

This is structural pattern matching only: PUSH4 selector constants show up
verbatim in a contract's dispatcher, and EIP-1167 minimal proxies have a
fixed template around the delegate address.
"""

from __future__ import annotations

import re

from eth_utils import to_checksum_address

# EIP-1167: 363d3d373d3d3d363d73 <20-byte address> 5af43d82803e903d91602b57fd5bf3
_MINIMAL_PROXY_RE = re.compile(
    r"^(?:0x)?363d3d373d3d3d363d73([0-9a-f]{40})5af43d82803e903d91602b57fd5bf3$"
)


def is_empty_code(code: str | None) -> bool:
    return not code or code in ("0x", "0x0")


def contains_selector(code: str | None, selector: str) -> bool:
    if is_empty_code(code):
        return False
    needle = selector.lower().removeprefix("0x")
    return needle in code.lower()


def contains_any_selector(code: str | None, selectors: list[str]) -> bool:
    return any(contains_selector(code, s) for s in selectors)


def minimal_proxy_target(code: str | None) -> str | None:
    """Return the delegate address of an EIP-1167 clone, or None."""
    if is_empty_code(code):
        return None
    match = _MINIMAL_PROXY_RE.match(code.lower())
    if not match:
        return None
    return to_checksum_address("0x" + match.group(1))
