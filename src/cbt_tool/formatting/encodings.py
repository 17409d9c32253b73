"""Encodings and fixed-width binary types understood by value formatting.

Also holds the text helpers shared by the formatters: Go-compatible string
quoting and number rendering, so output matches what cbt users already see.
"""

from __future__ import annotations

import math
import struct
from enum import Enum

from cbt_tool.core.exceptions import (
    ByteLengthMismatchError,
    UnknownEncodingError,
    UnknownTypeError,
)


class EncodingKind(Enum):
    NONE = "none"
    BIG_ENDIAN = "bigendian"
    LITTLE_ENDIAN = "littleendian"
    PROTOCOL_BUFFER = "protocolbuffer"
    HEX = "hex"
    JSON = "json"

    @property
    def is_binary(self) -> bool:
        return self in (EncodingKind.BIG_ENDIAN, EncodingKind.LITTLE_ENDIAN)


# Keys are lower case; lookups lower-case the user's spelling first.
ENCODING_ALIASES: dict[str, EncodingKind] = {
    "": EncodingKind.NONE,
    "bigendian": EncodingKind.BIG_ENDIAN,
    "b": EncodingKind.BIG_ENDIAN,
    "binary": EncodingKind.BIG_ENDIAN,
    "littleendian": EncodingKind.LITTLE_ENDIAN,
    "l": EncodingKind.LITTLE_ENDIAN,
    "protocolbuffer": EncodingKind.PROTOCOL_BUFFER,
    "protocol-buffer": EncodingKind.PROTOCOL_BUFFER,
    "protocol_buffer": EncodingKind.PROTOCOL_BUFFER,
    "proto": EncodingKind.PROTOCOL_BUFFER,
    "p": EncodingKind.PROTOCOL_BUFFER,
    "hex": EncodingKind.HEX,
    "h": EncodingKind.HEX,
    "json": EncodingKind.JSON,
    "j": EncodingKind.JSON,
}


def lookup_encoding(name: str) -> EncodingKind:
    """Return the EncodingKind for a case-insensitive encoding name or alias.

    Raises UnknownEncodingError for anything else.
    """
    try:
        return ENCODING_ALIASES[name.lower()]
    except KeyError:
        msg = f"invalid encoding: {name}"
        raise UnknownEncodingError(msg) from None


class BinaryType(Enum):
    """Fixed-width numeric element types: (struct code, width in bytes)."""

    INT8 = ("b", 1)
    INT16 = ("h", 2)
    INT32 = ("i", 4)
    INT64 = ("q", 8)
    UINT8 = ("B", 1)
    UINT16 = ("H", 2)
    UINT32 = ("I", 4)
    UINT64 = ("Q", 8)
    FLOAT32 = ("f", 4)
    FLOAT64 = ("d", 8)

    def __init__(self, code: str, width: int) -> None:
        self.code = code
        self.width = width

    @property
    def type_name(self) -> str:
        return self.name.lower()

    @property
    def is_float(self) -> bool:
        return self in (BinaryType.FLOAT32, BinaryType.FLOAT64)

    def unpack(self, data: bytes, big_endian: bool) -> tuple[int | float, ...]:
        """Decode every element of ``data``.

        Raises ByteLengthMismatchError unless the length is a multiple of
        the element width.
        """
        if len(data) % self.width:
            msg = (
                f"data size, {len(data)}, isn't a multiple of element size, "
                f"{self.width}"
            )
            raise ByteLengthMismatchError(msg)
        order = ">" if big_endian else "<"
        return struct.unpack(f"{order}{len(data) // self.width}{self.code}", data)

    def format_element(self, value: int | float) -> str:
        if self.is_float:
            return format_go_float(value, single=self is BinaryType.FLOAT32)
        return str(value)

    def format(self, data: bytes, big_endian: bool) -> str:
        """Render ``data`` as a scalar when it holds one element, else as a list."""
        values = self.unpack(data, big_endian)
        rendered = [self.format_element(v) for v in values]
        if len(data) == self.width:
            return rendered[0]
        return "[" + " ".join(rendered) + "]"


BINARY_TYPES: dict[str, BinaryType] = {t.type_name: t for t in BinaryType}


def lookup_binary_type(name: str) -> BinaryType:
    """Return the BinaryType for a case-insensitive type name.

    Raises UnknownTypeError for anything else.
    """
    try:
        return BINARY_TYPES[name.lower()]
    except KeyError:
        msg = f"invalid type: {name}"
        raise UnknownTypeError(msg) from None


def _shortest_digits(value: float, single: bool) -> tuple[str, int]:
    """Shortest decimal digits that round-trip ``value`` at its width.

    Returns the significant digits (no dot) and the decimal exponent of the
    first digit.
    """
    for precision in range(1, 18):
        text = f"{value:.{precision - 1}e}"
        candidate = float(text)
        if single:
            try:
                candidate = struct.unpack("f", struct.pack("f", candidate))[0]
            except OverflowError:
                continue
        if candidate == value:
            break
    mantissa, exponent = text.split("e")
    digits = mantissa.replace(".", "").rstrip("0") or "0"
    return digits, int(exponent)


def format_go_float(value: float, single: bool = False) -> str:
    """Render a float the way Go's %v verb does."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"

    sign = "-" if math.copysign(1.0, value) < 0 else ""
    value = abs(value)
    if value == 0:
        return sign + "0"

    digits, exponent = _shortest_digits(value, single)
    if exponent < -4 or exponent >= 6:
        mantissa = digits[0]
        if len(digits) > 1:
            mantissa += "." + digits[1:]
        exp_sign = "-" if exponent < 0 else "+"
        return f"{sign}{mantissa}e{exp_sign}{abs(exponent):02d}"

    if exponent < 0:
        return f"{sign}0.{'0' * (-exponent - 1)}{digits}"
    if len(digits) <= exponent + 1:
        return sign + digits + "0" * (exponent + 1 - len(digits))
    return f"{sign}{digits[: exponent + 1]}.{digits[exponent + 1 :]}"


_QUOTE_ESCAPES: dict[str, str] = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}


def _quote_char(ch: str) -> str:
    if ch in _QUOTE_ESCAPES:
        return _QUOTE_ESCAPES[ch]
    if ch == " " or ch.isprintable():
        return ch
    code = ord(ch)
    if code < 0x80:
        return f"\\x{code:02x}"
    if code < 0x10000:
        return f"\\u{code:04x}"
    return f"\\U{code:08x}"


def _utf8_length(lead: int) -> int:
    if lead < 0x80:
        return 1
    if lead >> 5 == 0b110:
        return 2
    if lead >> 4 == 0b1110:
        return 3
    if lead >> 3 == 0b11110:
        return 4
    return 0


def go_quote(data: bytes | str) -> str:
    """Double-quote ``data`` with Go-style escapes.

    Printable UTF-8 characters are kept; bytes that are not valid UTF-8 are
    written as ``\\xNN``.
    """
    if isinstance(data, str):
        return '"' + "".join(_quote_char(ch) for ch in data) + '"'

    out: list[str] = []
    i = 0
    while i < len(data):
        size = _utf8_length(data[i])
        ch = None
        if size:
            try:
                ch = data[i : i + size].decode("utf-8")
            except UnicodeDecodeError:
                ch = None
        if ch is None or len(ch) != 1:
            out.append(f"\\x{data[i]:02x}")
            i += 1
            continue
        out.append(_quote_char(ch))
        i += size
    return '"' + "".join(out) + '"'
