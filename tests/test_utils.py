import pytest

from abicodec import ParseError, parse_hex, parse_topics


def test_parse_hex():
    assert parse_hex("0x") == b""
    assert parse_hex("") == b""
    assert parse_hex("0xabCD") == b"\xab\xcd"
    assert parse_hex("0XABCD") == b"\xab\xcd"
    assert parse_hex(" abcd ") == b"\xab\xcd"
    assert parse_hex(b"\x01\x02") == b"\x01\x02"
    assert parse_hex(bytearray(b"\x01")) == b"\x01"

    with pytest.raises(ParseError, match=r"Invalid hex string for data: '0xzz'"):
        parse_hex("0xzz")
    with pytest.raises(ParseError, match="Hex string for call data has an odd number of digits"):
        parse_hex("0xabc", what="call data")
    with pytest.raises(ParseError, match="Expected data as a hex string, got int"):
        parse_hex(12)  # type: ignore[arg-type]


def test_parse_topics():
    expected = [b"\x01", b"\x02"]

    assert parse_topics(["0x01", b"\x02"]) == expected
    assert parse_topics('["0x01", "0x02"]') == expected
    assert parse_topics("0x01, 0x02") == expected
    assert parse_topics("[0x01,'0x02']") == expected
    assert parse_topics('"0x01", "0x02",') == expected
    assert parse_topics("0x01") == [b"\x01"]
    assert parse_topics("") == []
    assert parse_topics("[]") == []

    with pytest.raises(ParseError, match="Invalid hex string for topic: 'foo'"):
        parse_topics("0x01, foo")
