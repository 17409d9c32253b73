"""Cell value formatting for cbt."""

from cbt_tool.formatting.base import FormatterRegistry, ValueFormatter, registry
from cbt_tool.formatting.values import (
    BinaryFormatter,
    HexFormatter,
    JSONFormatter,
    LittleEndianFormatter,
    ProtobufFormatter,
    RawFormatter,
)
from cbt_tool.formatting.engine import ValueFormatting
from cbt_tool.formatting.rows import RowFormatter, render_row
