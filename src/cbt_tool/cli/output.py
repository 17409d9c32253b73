"""Output helpers for rendered rows and documentation."""

from __future__ import annotations

import sys
from datetime import tzinfo
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from rich.console import Console
from rich.markdown import Markdown

from cbt_tool.core.exceptions import InputError
from cbt_tool.formatting.rows import RowFormatter

if TYPE_CHECKING:
    from collections.abc import Iterable

    from cbt_tool.core.models import Row
    from cbt_tool.formatting.engine import ValueFormatting


def detect_tty() -> bool:
    return sys.stdout.isatty()


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Return the zone for ``--timezone``; None means local time."""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        msg = f"Unknown time zone: {name}"
        raise InputError(msg) from e


def write_rows(
    formatting: ValueFormatting, rows: Iterable[Row], tz: tzinfo | None = None
) -> None:
    """Write rendered rows to stdout, each followed by a blank line."""
    formatter = RowFormatter(formatting, tz)
    for row in rows:
        # Render the whole row first so a bad value doesn't leave half a row.
        text = "".join(formatter.format(row))
        sys.stdout.write(text + "\n")


def write_markdown(text: str) -> None:
    """Render markdown on a terminal, or write it as-is when piped."""
    if not detect_tty():
        sys.stdout.write(text)
        return
    Console().print(Markdown(text))
