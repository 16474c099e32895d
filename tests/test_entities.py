import os

import pytest

from abicodec import Address, TopicHash, ValidationError

CHECKSUMMED = [
    "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
    "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
    "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB",
    "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb",
    "0x52908400098527886E0F7030069857D2E4169EE7",
    "0xde709f2102306220921060314715629080e2fb77",
]


def test_address():
    random_addr = b"dv\xbbCQ,\xfe\xd0\xbfF\x8aq\x07OK\xf9\xa1i\x88("
    random_addr_checksum = "0x6476Bb43512CFed0bF468a71074F4bF9A1698828"

    assert Address(random_addr).checksum == random_addr_checksum
    assert str(Address(random_addr)) == random_addr_checksum
    assert Address(random_addr).hex() == random_addr_checksum.lower()
    assert bytes(Address(random_addr)) == random_addr
    assert repr(Address(random_addr)) == f"Address.from_hex({random_addr_checksum})"

    assert Address.from_hex(random_addr_checksum) == Address(random_addr)
    assert Address.from_hex(random_addr_checksum[2:]) == Address(random_addr)
    assert Address.from_hex(random_addr_checksum.lower()) == Address(random_addr)
    assert Address.from_hex(" " + random_addr_checksum + " ") == Address(random_addr)

    # The type is hashable
    addr_set = {Address(random_addr), Address(b"\x01" * 20), Address(random_addr)}
    assert len(addr_set) == 2

    with pytest.raises(ValidationError, match="Address must be a bytestring, got str"):
        Address(random_addr_checksum)  # type: ignore[arg-type]

    with pytest.raises(ValidationError, match="Address must be 20 bytes long, got 19"):
        Address(random_addr[:-1])

    with pytest.raises(ValidationError, match="Invalid address: '0x6476'"):
        Address.from_hex("0x6476")

    with pytest.raises(ValidationError, match="Address must be a hex string, got bytes"):
        Address.from_hex(random_addr)  # type: ignore[arg-type]


def test_checksum_vectors():
    for checksummed in CHECKSUMMED:
        assert Address.from_hex(checksummed.lower()).checksum == checksummed
        assert Address.from_hex(checksummed).checksum == checksummed


def test_topic_hash():
    val = os.urandom(32)
    topic_hash = TopicHash(val)

    assert bytes(topic_hash) == val
    assert str(topic_hash) == "0x" + val.hex()
    assert topic_hash == TopicHash(val)

    # Different types with the same contents are not equal
    assert topic_hash != val
    assert Address(val[:20]) != TopicHash(val)

    with pytest.raises(ValidationError, match="TopicHash must be 32 bytes long, got 20"):
        TopicHash(val[:20])
