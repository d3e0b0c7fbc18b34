"""Byte-level transport of JSON text as raw bytes or Base64."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterable
from enum import Enum
from typing import Final


class TextEncoding(Enum):
    """Text encodings available for byte transport.

    UNICODE and UTF32 are little-endian and written without a byte order mark.
    """

    UTF8 = "utf-8"
    ASCII = "ascii"
    UNICODE = "utf-16-le"
    UTF32 = "utf-32-le"


# ASCII substitutes unencodable characters instead of failing
_ERROR_MODES: Final = {TextEncoding.ASCII: "replace"}


class CodecError(ValueError):
    """
    Handles failed conversions between JSON text and bytes.

    Carries the encoding involved and the offset of the first offending
    character or byte, when known.
    """

    def __init__(
        self, msg: str, encoding: TextEncoding, pos: int = 0
    ) -> None:
        self.msg = msg
        self.encoding = encoding
        self.pos = pos
        super().__init__(f"{msg} ({encoding.name}, position {pos})")


def encode_text(
    text: str, encoding: TextEncoding = TextEncoding.UTF8
) -> bytes:
    """Encode JSON text to bytes.

    Args:
        text: The JSON text to convert
        encoding: Target text encoding (default UTF-8)

    Returns:
        The encoded bytes
    """
    if not text:
        raise CodecError("JSON text is empty", encoding)

    errors = _ERROR_MODES.get(encoding, "strict")
    try:
        return text.encode(encoding.value, errors)
    except UnicodeEncodeError as e:
        raise CodecError(
            f"Cannot encode character {text[e.start]!r}", encoding, e.start
        ) from e


def decode_bytes(
    data: bytes | Iterable[int], encoding: TextEncoding = TextEncoding.UTF8
) -> str:
    """Decode bytes back to JSON text.

    Args:
        data: Raw bytes, or an iterable of ints in range(256)
        encoding: Source text encoding (default UTF-8)

    Returns:
        The decoded text
    """
    if not isinstance(data, bytes | bytearray):
        try:
            data = bytes(data)
        except (TypeError, ValueError) as e:
            raise CodecError(f"Invalid byte values: {e}", encoding) from e

    if not data:
        raise CodecError("Byte array is empty", encoding)

    errors = _ERROR_MODES.get(encoding, "strict")
    try:
        return data.decode(encoding.value, errors)
    except UnicodeDecodeError as e:
        raise CodecError(
            f"Cannot decode byte 0x{data[e.start]:02x}", encoding, e.start
        ) from e


def to_base64(text: str, encoding: TextEncoding = TextEncoding.UTF8) -> str:
    """Encode JSON text as a Base64 string of its encoded bytes."""
    return base64.b64encode(encode_text(text, encoding)).decode("ascii")


def from_base64(
    b64_text: str, encoding: TextEncoding = TextEncoding.UTF8
) -> str:
    """Decode a Base64 string and then its bytes back to JSON text."""
    if not b64_text:
        raise CodecError("Base64 string is empty", encoding)

    try:
        data = base64.b64decode(b64_text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CodecError(f"Invalid Base64 string: {e}", encoding) from e
    return decode_bytes(data, encoding)
