from __future__ import annotations

import pytest
from eth_abi import encode

from mintkit.utils.abi import (
    decode_output,
    encode_call,
    function_selector,
    normalize_signature,
    parse_signature,
    split_types,
)
from mintkit.utils.address import (
    ZERO_ADDRESS,
    is_zero_address,
    normalize_address,
    validate_evm_address,
)
from mintkit.utils.bytecode import (
    contains_any_selector,
    contains_selector,
    is_empty_code,
    minimal_proxy_target,
)

IMPLEMENTATION = "0x" + "5a" * 20
PROXY_CODE = (
    "0x363d3d373d3d3d363d73" + "5a" * 20 + "5af43d82803e903d91602b57fd5bf3"
)


class TestSignatures:
    def test_bare_name_takes_quantity(self):
        assert normalize_signature("publicMint") == "publicMint(uint256)"

    def test_full_signature_untouched(self):
        assert normalize_signature("claim(address, uint256)") == "claim(address,uint256)"

    def test_split_respects_tuples(self):
        assert split_types("(bytes32,bytes32[]),uint256,address,bytes") == [
            "(bytes32,bytes32[])",
            "uint256",
            "address",
            "bytes",
        ]

    def test_parse_no_args(self):
        assert parse_signature("totalSupply()") == ("totalSupply", [])

    def test_malformed(self):
        with pytest.raises(ValueError):
            parse_signature("mint(uint256")

    def test_known_selectors(self):
        assert function_selector("mint(uint256)") == "0xa0712d68"
        assert function_selector("supportsInterface(bytes4)") == "0x01ffc9a7"


class TestEncodeDecode:
    def test_encode_mint_quantity(self):
        assert encode_call("mint(uint256)", [2]) == "0xa0712d68" + "0" * 63 + "2"

    def test_encode_argument_count_mismatch(self):
        with pytest.raises(ValueError):
            encode_call("mint(uint256)", [])

    def test_decode_single_unwrapped(self):
        data = "0x" + encode(["uint256"], [42]).hex()
        assert decode_output(("uint256",), data) == 42

    def test_decode_multiple(self):
        data = "0x" + encode(["address", "uint256"], [ZERO_ADDRESS, 7]).hex()
        assert decode_output(("address", "uint256"), data) == (ZERO_ADDRESS, 7)

    def test_decode_empty_raises(self):
        with pytest.raises(ValueError):
            decode_output(("uint256",), "0x")


class TestBytecode:
    def test_empty_code(self):
        assert is_empty_code("0x")
        assert is_empty_code(None)
        assert not is_empty_code("0x60")

    def test_contains_selector(self):
        code = "0x6080604052" + "63a0712d68" + "14"
        assert contains_selector(code, "0xa0712d68")
        assert not contains_selector(code, "0x64869dad")

    def test_contains_any(self):
        assert contains_any_selector("0x63" + "4F2C436D", ["0x64869dad", "0x4f2c436d"])

    def test_minimal_proxy_target(self):
        assert minimal_proxy_target(PROXY_CODE) == normalize_address(IMPLEMENTATION)

    def test_regular_code_is_not_proxy(self):
        assert minimal_proxy_target("0x6080604052") is None


class TestAddress:
    def test_validate(self):
        assert validate_evm_address("0x" + "ab" * 20)
        assert not validate_evm_address("0x1234")
        assert not validate_evm_address("ab" * 21)

    def test_normalize_checksums(self):
        assert normalize_address(
            "0x00005ea00ac477b1030ce78506496e8c2de24bf5"
        ) == "0x00005EA00Ac477B1030CE78506496e8C2dE24bf5"

    def test_zero_address(self):
        assert is_zero_address(ZERO_ADDRESS)
        assert is_zero_address(None)
        assert not is_zero_address("0x" + "01" * 20)
