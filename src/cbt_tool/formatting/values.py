"""Formatters for each value encoding.

Importing this module registers every formatter with the encoding registry.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from google.protobuf import message, message_factory, text_format

from cbt_tool.core.exceptions import JSONParseError, ProtoDecodeError
from cbt_tool.formatting.base import registry
from cbt_tool.formatting.encodings import EncodingKind, go_quote

if TYPE_CHECKING:
    from google.protobuf.descriptor import Descriptor

    from cbt_tool.formatting.encodings import BinaryType


class RawFormatter:
    """Quoted string of the raw bytes, used when no encoding is configured."""

    def format(self, value: bytes) -> str:
        return go_quote(value)


class HexFormatter:
    def format(self, value: bytes) -> str:
        return value.hex(" ")


class BinaryFormatter:
    """Fixed-width numeric values, big-endian."""

    big_endian = True

    def __init__(self, binary_type: BinaryType) -> None:
        self.binary_type = binary_type

    def format(self, value: bytes) -> str:
        return self.binary_type.format(value, self.big_endian)


class LittleEndianFormatter(BinaryFormatter):
    big_endian = False


def _reject_constant(name: str) -> Any:
    msg = f"invalid JSON literal: {name}"
    raise ValueError(msg)


class JSONFormatter:
    """Indented rendering of JSON documents with sorted object keys.

    Numbers are always shown with two decimal places.
    """

    def format(self, value: bytes) -> str:
        try:
            doc = json.loads(value, parse_constant=_reject_constant)
            text = self._render(doc, "")
        except (ValueError, OverflowError) as e:
            msg = f"couldn't parse JSON value: {e}"
            raise JSONParseError(msg) from e
        return text.lstrip("\n")

    def _render(self, v: Any, indent: str) -> str:
        if isinstance(v, str):
            return f"{indent}{go_quote(v):>6}"
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, (int, float)):
            return f"{indent}{float(v):6.2f}"
        if isinstance(v, list):
            s = f"\n{indent}[\n"
            for item in v:
                s += self._render(item, "  " + indent) + "\n"
            return s + f"{indent}]"
        if isinstance(v, dict):
            s = "\n"
            for key in sorted(v):
                s += f"{indent}{key}: {self._render(v[key], '  ' + indent)}\n"
            return s
        return "null"


class ProtobufFormatter:
    """Text rendering of serialized messages of one message type.

    Fields are printed in the order they are declared, at every level.
    """

    def __init__(self, descriptor: Descriptor) -> None:
        self.descriptor = descriptor
        self._message_class = message_factory.GetMessageClass(descriptor)

    def format(self, value: bytes) -> str:
        msg = self._message_class()
        try:
            msg.ParseFromString(value)
        except message.DecodeError as e:
            err = f"couldn't deserialize bytes to protobuffer message: {e}"
            raise ProtoDecodeError(err) from e
        return text_format.MessageToString(msg, as_utf8=True, use_index_order=True)


registry.register(EncodingKind.NONE, RawFormatter)
registry.register(EncodingKind.HEX, HexFormatter)
registry.register(EncodingKind.BIG_ENDIAN, BinaryFormatter)
registry.register(EncodingKind.LITTLE_ENDIAN, LittleEndianFormatter)
registry.register(EncodingKind.JSON, JSONFormatter)
registry.register(EncodingKind.PROTOCOL_BUFFER, ProtobufFormatter)
