"""Row rendering for the lookup and read commands."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, tzinfo
from io import StringIO
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from cbt_tool.core.models import Row
    from cbt_tool.formatting.engine import ValueFormatting

SEPARATOR = "-" * 40
TIMESTAMP_FORMAT = "%Y/%m/%d-%H:%M:%S.%f"
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def format_timestamp(micros: int, tz: tzinfo | None = None) -> str:
    """Render a microsecond timestamp in ``tz`` (local time when None)."""
    ts = _EPOCH + timedelta(microseconds=micros)
    return ts.astimezone(tz).strftime(TIMESTAMP_FORMAT)


class RowFormatter:
    """Renders rows with every cell value decoded by a ValueFormatting.

    Families are printed in name order and cells within a family in column
    order. A value that can't be formatted aborts the row.
    """

    def __init__(self, formatting: ValueFormatting, tz: tzinfo | None = None) -> None:
        self.formatting = formatting
        self.tz = tz

    def format(self, row: Row) -> Iterator[str]:
        yield SEPARATOR + "\n"
        yield row.key + "\n"
        for family in sorted(row.cells):
            for cell in sorted(row.cells[family], key=lambda c: c.column):
                yield f"  {cell.column:<40} @ {format_timestamp(cell.timestamp, self.tz)}\n"
                yield self.formatting.format("    ", family, cell.column, cell.value)


def render_row(row: Row, formatting: ValueFormatting, tz: tzinfo | None = None) -> str:
    buf = StringIO()
    for chunk in RowFormatter(formatting, tz).format(row):
        buf.write(chunk)
    return buf.getvalue()
