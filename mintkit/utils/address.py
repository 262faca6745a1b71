import re

from eth_utils import to_checksum_address

ZERO_ADDRESS = "0x" + "0" * 40


def validate_evm_address(address: str) -> bool:
    return bool(re.match(r"^0x[0-9a-fA-F]{40}$", address))


def normalize_address(address: str) -> str:
    """Return the EIP-55 checksummed form of a validated address."""
    return to_checksum_address(address.strip())


def is_zero_address(address: str | None) -> bool:
    if not address:
        return True
    return int(address, 16) == 0
