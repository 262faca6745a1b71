"""Minimal ABI helpers built on eth-abi / eth-utils.

Functions are described by their canonical signature string, e.g.
``"mintPublic(address,address,address,uint256)"``; return shapes are a
sequence of ABI type strings, e.g. ``("uint256",)`` or
``("(uint80,uint48,uint48,uint16,uint16,bool)",)``.
"""

from __future__ import annotations

from typing import Any, Sequence

from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector


def split_types(params: str) -> list[str]:
    """Split a comma separated type list, respecting tuple parentheses."""
    types: list[str] = []
    depth = 0
    current = ""
    for ch in params:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "," and depth == 0:
            types.append(current.strip())
            current = ""
            continue
        current += ch
    if current.strip():
        types.append(current.strip())
    return types


def normalize_signature(signature: str) -> str:
    """Bare function names are taken to accept a single quantity argument."""
    signature = signature.strip().replace(" ", "")
    if "(" not in signature:
        return f"{signature}(uint256)"
    return signature


def parse_signature(signature: str) -> tuple[str, list[str]]:
    signature = normalize_signature(signature)
    name, _, rest = signature.partition("(")
    if not name or not rest.endswith(")"):
        raise ValueError(f"Malformed function signature: {signature!r}")
    return name, split_types(rest[:-1])


def function_selector(signature: str) -> str:
    return "0x" + function_signature_to_4byte_selector(normalize_signature(signature)).hex()


def encode_call(signature: str, args: Sequence[Any] = ()) -> str:
    name, types = parse_signature(signature)
    if len(types) != len(args):
        raise ValueError(
            f"{name} expects {len(types)} arguments, got {len(args)}"
        )
    selector = function_signature_to_4byte_selector(f"{name}({','.join(types)})")
    return "0x" + (selector + encode(types, list(args))).hex()


def hex_to_bytes(data: str | bytes) -> bytes:
    if isinstance(data, bytes):
        return data
    data = data[2:] if data.startswith("0x") else data
    return bytes.fromhex(data)


def decode_output(returns: Sequence[str], data: str | bytes) -> Any:
    """Decode return data; a single return type is unwrapped."""
    raw = hex_to_bytes(data)
    if not raw:
        raise ValueError("Empty return data")
    values = decode(list(returns), raw)
    if len(returns) == 1:
        return values[0]
    return values
