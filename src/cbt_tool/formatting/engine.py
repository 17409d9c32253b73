"""Value formatting engine.

One ValueFormatting instance is set up per command from the format file.
It resolves each column's encoding and type on first use and caches the
resulting formatter for the rest of the instance's lifetime.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from cbt_tool.core.config import FormatSettings, load_format_settings
from cbt_tool.core.exceptions import MalformedColumnNameError
from cbt_tool.core.logging import get_logger
from cbt_tool.formatting.base import registry
from cbt_tool.formatting.encodings import EncodingKind, lookup_binary_type
from cbt_tool.formatting.resolver import column_encoding_type, validate_columns, validate_format
from cbt_tool.formatting.schema import MessageTypeRegistry, load_message_types

if TYPE_CHECKING:
    from pathlib import Path

    from cbt_tool.formatting.base import ValueFormatter


def indent_block(text: str, prefix: str) -> str:
    """Prefix every line of ``text`` and end the block with one newline."""
    lines = text.rstrip("\n").split("\n")
    return "\n".join(prefix + line for line in lines) + "\n"


class ValueFormatting:
    """Formats cell values according to format settings."""

    def __init__(
        self,
        settings: FormatSettings | None = None,
        message_types: MessageTypeRegistry | None = None,
    ) -> None:
        self.settings = settings if settings is not None else FormatSettings()
        self.message_types = message_types if message_types is not None else MessageTypeRegistry()
        self._formatters: dict[tuple[str, str], ValueFormatter] = {}
        self._lock = threading.Lock()

    @classmethod
    def setup(cls, format_file: str | Path | None = None) -> ValueFormatting:
        """Build an engine from a format file.

        The file is optional; protocol-buffer definitions are loaded and all
        declared columns validated either way.
        """
        settings = load_format_settings(format_file)
        return cls.from_settings(settings)

    @classmethod
    def from_settings(cls, settings: FormatSettings) -> ValueFormatting:
        message_types = load_message_types(
            settings.protocol_buffer_definitions,
            settings.protocol_buffer_paths,
        )
        formatting = cls(settings, message_types)
        formatting.validate()
        return formatting

    def validate(self) -> None:
        """Raise FormatSettingsError listing every misconfigured column."""
        validate_columns(self.settings, self.message_types)

    def _build(self, family: str, column: str) -> ValueFormatter:
        encoding, type_name = column_encoding_type(self.settings, family, column)
        kind, type_name = validate_format(column, encoding, type_name, self.message_types)

        if kind.is_binary:
            formatter = registry.get(kind, binary_type=lookup_binary_type(type_name))
        elif kind is EncodingKind.PROTOCOL_BUFFER:
            formatter = registry.get(kind, descriptor=self.message_types.get(type_name))
        else:
            formatter = registry.get(kind)

        get_logger(__name__).debug(
            "Built value formatter",
            family=family,
            column=column,
            encoding=kind.value,
            type=type_name,
        )
        return formatter

    def formatter_for(self, family: str, column: str) -> ValueFormatter:
        """Return the cached formatter for a column, building it on first use."""
        key = (family, column)
        formatter = self._formatters.get(key)
        if formatter is not None:
            return formatter
        with self._lock:
            formatter = self._formatters.get(key)
            if formatter is None:
                formatter = self._build(family, column)
                self._formatters[key] = formatter
        return formatter

    def format(self, prefix: str, family: str, column: str, value: bytes) -> str:
        """Format a cell value of ``column`` (``family:qualifier``).

        Every output line is prefixed with ``prefix``; the result ends with a
        single newline.
        """
        parts = column.split(":", 1)
        if len(parts) != 2:
            msg = f"column name doesn't include family and column: {column}"
            raise MalformedColumnNameError(msg)
        fam, qualifier = parts
        if fam != family:
            msg = f"family, {family}, and column family, {fam}, don't match"
            raise MalformedColumnNameError(msg)

        formatter = self.formatter_for(family, qualifier)
        return indent_block(formatter.format(value), prefix)
