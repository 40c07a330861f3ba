import pytest

from anchor_coder import (
    Encoding,
    base58_decode_string,
    base58_encode_bytes,
    hex_decode,
    hex_encode,
)
from anchor_coder.encoding import decode_text


def test_hex():
    assert hex_encode(b"\x00\xab") == "00ab"
    assert hex_decode("00ab") == b"\x00\xab"
    assert hex_decode("0x00AB") == b"\x00\xab"


def test_base58():
    assert base58_encode_bytes(bytes(32)) == "1" * 32
    assert base58_decode_string("2g") == b"a"


@pytest.mark.parametrize(
    "text, encoding",
    [("0x6869", Encoding.HEX), ("6869", "hex"), ("8wr", Encoding.BASE58)],
)
def test_decode_text(text, encoding):
    assert decode_text(text, encoding) == b"hi"


def test_decode_text_rejects_unknown_encoding():
    with pytest.raises(ValueError):
        decode_text("00", "base64")
