from enum import Enum
from typing import Union

import base58


class Encoding(str, Enum):
    HEX = "hex"
    BASE58 = "base58"


def base58_encode_bytes(b: bytes) -> str:
    return base58.b58encode(b).decode("ascii")


def base58_decode_string(s: str) -> bytes:
    return base58.b58decode(s)


def hex_encode(b: bytes) -> str:
    return b.hex()


def hex_decode(s: str) -> bytes:
    if s.startswith(("0x", "0X")):
        s = s[2:]
    return bytes.fromhex(s)


def decode_text(text: str, encoding: Union[Encoding, str] = Encoding.HEX) -> bytes:
    """Turn hex or base58 text into raw bytes. Raises ValueError on bad input."""
    encoding = Encoding(encoding)
    if encoding is Encoding.HEX:
        return hex_decode(text)
    return base58_decode_string(text)
