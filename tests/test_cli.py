import io
import json

import pytest
from eth_utils import keccak

from abicodec._config import AMBIGUITY_ENV, CHECKSUM_ENV
from abicodec.cli import main

RECIPIENT = "0xe2e13fccd48644cc68ce9cd40ee4d9433f23f1f0"

TRANSFER_CALL = "0xa9059cbb" + "00" * 12 + RECIPIENT[2:] + "0" * 60 + "4e20"

TRANSFER_TOPIC = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"

REVERT_PAYLOAD = (
    "0x08c379a0"
    "0000000000000000000000000000000000000000000000000000000000000020"
    "000000000000000000000000000000000000000000000000000000000000001a"
    "4e6f7420656e6f7567682045746865722070726f76696465642e000000000000"
)

TOKEN_ABI = [
    dict(
        type="function",
        name="transfer",
        inputs=[dict(name="to", type="address"), dict(name="amount", type="uint256")],
        outputs=[dict(name="", type="bool")],
    ),
    dict(
        type="event",
        name="Transfer",
        anonymous=False,
        inputs=[
            dict(name="from", type="address", indexed=True),
            dict(name="to", type="address", indexed=True),
            dict(name="value", type="uint256", indexed=False),
        ],
    ),
    dict(
        type="error",
        name="InsufficientBalance",
        inputs=[dict(name="available", type="uint256"), dict(name="required", type="uint256")],
    ),
]

CLASHING_ABI = [
    dict(type="function", name="burn", inputs=[dict(name="amount", type="uint256")]),
    dict(type="function", name="collate_propagate_storage", inputs=[dict(name="", type="bytes16")]),
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    monkeypatch.delenv(AMBIGUITY_ENV, raising=False)
    monkeypatch.delenv(CHECKSUM_ENV, raising=False)


@pytest.fixture
def abi_path(tmp_path):
    path = tmp_path / "token.json"
    path.write_text(json.dumps(TOKEN_ABI))
    return str(path)


@pytest.fixture
def clashing_abi_path(tmp_path):
    path = tmp_path / "clashing.json"
    path.write_text(json.dumps(CLASHING_ABI))
    return str(path)


def run_cli(capsys, *args):
    main(list(args))
    return json.loads(capsys.readouterr().out)


def run_cli_error(capsys, *args):
    with pytest.raises(SystemExit) as exc:
        main(list(args))
    assert exc.value.code == 1
    return capsys.readouterr().err


def test_selector(capsys):
    result = run_cli(capsys, "selector", "transfer(address,uint256)")
    assert result["signature"] == "transfer(address,uint256)"
    assert result["selector"] == "0xa9059cbb"

    result = run_cli(
        capsys, "selector", "event Transfer(address indexed from, address indexed to, uint256)"
    )
    assert result["signature"] == "Transfer(address,address,uint256)"
    assert result["topic"] == TRANSFER_TOPIC


def test_encode_from_signature(capsys):
    result = run_cli(capsys, "encode", "transfer(address,uint256)", RECIPIENT, "20000")
    assert result == dict(
        signature="transfer(address,uint256)", selector="0xa9059cbb", data=TRANSFER_CALL
    )


def test_encode_from_abi(capsys, abi_path):
    result = run_cli(capsys, "encode", "--abi", abi_path, "transfer", RECIPIENT, "0x4e20")
    assert result["data"] == TRANSFER_CALL


def test_encode_composite_values(capsys):
    result = run_cli(capsys, "encode", "f(uint8[],(bool,string))", "[1, 2]", '[true, "x"]')
    data = bytes.fromhex(result["data"][2:])
    assert len(data) == 4 + 32 * 9


def test_decode_call(capsys, abi_path):
    result = run_cli(capsys, "decode-call", "--abi", abi_path, TRANSFER_CALL)
    assert result == dict(
        kind="function",
        name="transfer",
        signature="transfer(address,uint256)",
        selector="0xa9059cbb",
        ambiguous=False,
        params=[
            dict(name="to", type="address", value=RECIPIENT, indexed=False),
            dict(name="amount", type="uint256", value="20000", indexed=False),
        ],
    )


def test_decode_call_checksum(capsys, abi_path, monkeypatch):
    result = run_cli(capsys, "--checksum", "decode-call", "--abi", abi_path, TRANSFER_CALL)
    checksummed = result["params"][0]["value"]
    assert checksummed != RECIPIENT
    assert checksummed.lower() == RECIPIENT

    monkeypatch.setenv(CHECKSUM_ENV, "1")
    result = run_cli(capsys, "decode-call", "--abi", abi_path, TRANSFER_CALL)
    assert result["params"][0]["value"] == checksummed


def test_decode_call_stdin(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(TOKEN_ABI)))
    result = run_cli(capsys, "decode-call", "--abi", "-", TRANSFER_CALL)
    assert result["name"] == "transfer"


def test_decode_log(capsys, abi_path):
    sender = "0x" + "00" * 12 + "01" * 20
    recipient = "0x" + "00" * 12 + RECIPIENT[2:]
    topics = ",".join([TRANSFER_TOPIC, sender, recipient])
    data = "0x" + "0" * 60 + "4e20"

    result = run_cli(capsys, "decode-log", "--abi", abi_path, "--topics", topics, "--data", data)
    assert result["kind"] == "event"
    assert result["name"] == "Transfer"
    assert result["params"] == [
        dict(name="from", type="address", value="0x" + "01" * 20, indexed=True),
        dict(name="to", type="address", value=RECIPIENT, indexed=True),
        dict(name="value", type="uint256", value="20000", indexed=False),
    ]


def test_decode_error(capsys, abi_path):
    result = run_cli(capsys, "decode-error", REVERT_PAYLOAD)
    assert result["name"] == "Error"
    assert result["params"] == [
        dict(name="message", type="string", value="Not enough Ether provided.", indexed=False)
    ]

    error_selector = keccak(b"InsufficientBalance(uint256,uint256)")[:4].hex()
    custom = "0x" + error_selector + "0" * 63 + "1" + "0" * 63 + "2"
    result = run_cli(capsys, "decode-error", "--abi", abi_path, custom)
    assert result["name"] == "InsufficientBalance"
    assert [param["value"] for param in result["params"]] == ["1", "2"]


def test_checksum(capsys):
    result = run_cli(capsys, "checksum", "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")
    assert result == dict(
        lowercase="0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed",
        uppercase="0x5AAEB6053F3E94C9B9A09F33669435E7EF1BEAED",
        checksum="0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
    )


def test_ambiguity(capsys, clashing_abi_path, monkeypatch):
    call = "0x42966c68" + "0" * 63 + "5"

    err = run_cli_error(capsys, "decode-call", "--abi", clashing_abi_path, call)
    assert "Error: Selector 0x42966c68 matches several entries" in err

    result = run_cli(capsys, "--ambiguity", "first", "decode-call", "--abi", clashing_abi_path, call)
    assert result["name"] == "burn"
    assert result["ambiguous"] is True

    monkeypatch.setenv(AMBIGUITY_ENV, "first")
    result = run_cli(capsys, "decode-call", "--abi", clashing_abi_path, call)
    assert result["ambiguous"] is True


def test_errors(capsys, abi_path, tmp_path):
    err = run_cli_error(capsys, "decode-call", "--abi", abi_path, "0xdeadbeef")
    assert "Error: Could not find a function with selector 0xdeadbeef" in err

    err = run_cli_error(capsys, "encode", "transfer(address,uint256)", RECIPIENT)
    assert "Error: Expected 2 values, got 1" in err

    err = run_cli_error(capsys, "encode", "transfer(address,uint256)", RECIPIENT, "-1")
    assert "must correspond to a non-negative integer" in err

    err = run_cli_error(capsys, "decode-call", "--abi", str(tmp_path / "missing.json"), "0x")
    assert "Error:" in err

    err = run_cli_error(capsys, "checksum", "0x1234")
    assert "Error: Invalid address" in err

    # Usage errors are reported by argparse
    with pytest.raises(SystemExit) as exc:
        main(["decode-call"])
    assert exc.value.code == 2
