"""Row source resolution for cbt.

Reads exported rows from one of two sources:
1. File path, when given
2. stdin, when no file is given and input is piped

Rows are JSON: a list of ``{"key": ..., "cells": {family: [cell, ...]}}``
where each cell has ``column``, ``timestamp`` (microseconds) and a base64
``value``.
"""

from __future__ import annotations

import base64
import binascii
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from cbt_tool.core.exceptions import InputError
from cbt_tool.core.models import Cell, Row


def _read_source(file_path: str | None) -> str:
    if file_path is not None:
        p = Path(file_path)
        if not p.exists():
            msg = f"Rows file not found: {file_path}"
            raise InputError(msg)
        return p.read_text(encoding="utf-8")

    if not sys.stdin.isatty():
        return sys.stdin.read()

    msg = "No rows provided. Give a rows file or pipe rows via stdin."
    raise InputError(msg)


def _parse_row(data: Any) -> Row:
    if not isinstance(data, dict):
        msg = f"Invalid row: expected an object, got {type(data).__name__}"
        raise InputError(msg)
    key = data.get("key", "")
    cells: dict[str, list[Cell]] = {}
    for family, items in (data.get("cells") or {}).items():
        cells[family] = []
        for item in items:
            try:
                value = base64.b64decode(item.get("value", ""), validate=True)
                cells[family].append(
                    Cell(
                        row=key,
                        column=item["column"],
                        value=value,
                        timestamp=item.get("timestamp", 0),
                    )
                )
            except (KeyError, AttributeError, binascii.Error, ValidationError) as e:
                msg = f"Invalid cell in row {key!r}, family {family!r}: {e}"
                raise InputError(msg) from e
    return Row(key=key, cells=cells)


def load_rows(file_path: str | None) -> list[Row]:
    """Load rows from a file, or stdin when no file is given.

    Raises InputError when no source is available or the rows are invalid.
    """
    text = _read_source(file_path)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"Malformed rows JSON: {e}"
        raise InputError(msg) from e
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        msg = "Invalid rows: expected a list of rows"
        raise InputError(msg)
    return [_parse_row(item) for item in data]
