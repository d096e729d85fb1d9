"""Common utility helpers: base64, hex, timestamps."""

import base64
import binascii
import time

from cryptolab.common.errors import InvalidInput


def now_ms() -> int:
    """Return current time in Unix milliseconds."""
    return int(time.time() * 1000)


def b64_encode(data: bytes) -> str:
    """
    Base64-encode bytes -> str (ASCII).
    """
    return base64.b64encode(data).decode("ascii")


def b64_decode(s: str) -> bytes:
    """
    Base64-decode str -> bytes.

    Raises InvalidInput on anything that is not standard base64.
    """
    try:
        return base64.b64decode(s.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise InvalidInput("Envelope is not valid base64") from e


def to_hex(data: bytes) -> str:
    """Lowercase hex, for display of key material only."""
    return data.hex()


def base64_byte_size(s: str) -> int:
    """
    Number of raw bytes a base64 string encodes, without decoding it.
    """
    if not s:
        return 0
    padding = 0
    if s.endswith("=="):
        padding = 2
    elif s.endswith("="):
        padding = 1
    return (len(s) * 3) // 4 - padding
