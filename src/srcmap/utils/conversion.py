"""Byte, hex and fixed-width integer conversions for source file identifiers."""

import binascii
import re
import struct
from typing import Optional

from srcmap.errors import InvalidHexError, InvalidLengthError

LONG_SIZE = 8
_LONG = struct.Struct(">q")
_HEX_DIGITS = re.compile(r"(?:[0-9a-fA-F]{2})*")


def long_to_bytes(value: int) -> bytes:
    """Convert a signed 64-bit value to 8 big-endian bytes.

    The most significant byte of ``value`` is at index 0.

    Raises:
        InvalidLengthError: If value does not fit in a signed 64-bit integer
    """
    try:
        return _LONG.pack(value)
    except struct.error as e:
        raise InvalidLengthError(f"value does not fit in 8 bytes: {value}", value) from e


def bytes_to_long(data: bytes) -> int:
    """Convert 8 big-endian bytes to a signed 64-bit value.

    Raises:
        InvalidLengthError: If len(data) != 8
    """
    if data is None or len(data) != LONG_SIZE:
        raise InvalidLengthError("bytes must have length 8", data)
    return _LONG.unpack(bytes(data))[0]


def hex_to_bytes(text: Optional[str]) -> bytes:
    """Convert a string of hexadecimal digits to bytes.

    An initial ``0x`` or ``0X`` is ignored, as is the case of the digits.
    Blank input yields empty bytes.

    Raises:
        InvalidHexError: If the digits are not valid hex or have odd length
    """
    if text is None or not text.strip():
        return b""
    digits = text
    if digits.startswith(("0x", "0X")):
        digits = digits[2:]
    if not _HEX_DIGITS.fullmatch(digits):
        raise InvalidHexError(f"not a valid hex string: {text!r}", text)
    return binascii.unhexlify(digits)


def bytes_to_hex(data: Optional[bytes]) -> str:
    """Convert bytes to a lowercase string of hex digits without prefix."""
    if not data:
        return ""
    return binascii.hexlify(bytes(data)).decode("ascii")
