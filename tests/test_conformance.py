"""
Checks the codec against ``eth_abi``, the reference Python implementation.
"""

import pytest
from eth_abi import encode
from eth_utils import event_signature_to_log_topic, function_signature_to_4byte_selector

from abicodec import Method, decode_args, encode_args, event_topic, parse_type, selector

ADDR1 = bytes.fromhex("5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")
ADDR2 = bytes.fromhex("e2e13fccd48644cc68ce9cd40ee4d9433f23f1f0")

CASES = [
    (["uint256"], [0]),
    (["uint256", "int8", "bool"], [2**256 - 1, -128, True]),
    (["int256"], [-(2**255)]),
    (["address", "uint256"], [ADDR2, 20000]),
    (["bytes4", "bytes32"], [b"\x01\x02\x03\x04", b"\xff" * 32]),
    (["bytes"], [b""]),
    (["bytes", "string"], [b"\x01" * 33, "ሴ unicode"]),
    (["string"], ["a" * 64]),
    (["uint256[]"], [[]]),
    (["uint8[3]", "address[]"], [[1, 2, 3], [ADDR1, ADDR2]]),
    (["uint8[][]"], [[[1, 2], [], [3]]]),
    (["string[2]"], [["foo", "bar"]]),
    (["string[]", "uint256"], [["a", "", "bcd"], 7]),
    (["(uint256,string)"], [(1, "x")]),
    (["(uint256,bool)[2]"], [[(1, True), (2, False)]]),
    (["(uint256,string)[]", "bytes"], [[(1, "a"), (2, "bc")], b"tail"]),
    (["(bool,(string,bytes)[])[2]"], [[(True, [("a", b"\x01")]), (False, [])]]),
    (["bytes[][2]"], [[[b"\x01", b"\x02" * 40], []]]),
]


@pytest.mark.parametrize(("type_strs", "values"), CASES)
def test_encode_matches_eth_abi(type_strs, values):
    types = [parse_type(type_str) for type_str in type_strs]
    expected = encode(type_strs, values)
    assert encode_args(types, values) == expected

    # Decoding the reference encoding and encoding it back gives the same bytes
    assert encode_args(types, decode_args(types, expected)) == expected


@pytest.mark.parametrize(
    "signature",
    [
        "transfer(address,uint256)",
        "submit((uint256,string)[],bytes4)",
        "Transfer(address,address,uint256)",
        "f()",
    ],
)
def test_selectors_match_eth_utils(signature):
    assert selector(signature) == function_signature_to_4byte_selector(signature)
    assert event_topic(signature) == event_signature_to_log_topic(signature)


def test_method_call_matches_eth_abi():
    method = Method.from_signature("batch((address,uint256)[] transfers, string memo)")
    transfers = [(ADDR1, 1), (ADDR2, 2)]
    call = method(transfers, "memo")

    expected = encode(["(address,uint256)[]", "string"], [transfers, "memo"])
    assert call.data_bytes == method.selector + expected
