"""Tests for loading exported rows."""

import base64
import io
import json
from unittest.mock import patch

import pytest

from cbt_tool.core.exceptions import InputError
from cbt_tool.core.models import Cell
from cbt_tool.core.row_source import load_rows


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _write_rows(path, rows):
    path.write_text(json.dumps(rows))
    return str(path)


@pytest.mark.unit
def test_load_rows_from_file(temp_dir):
    path = _write_rows(
        temp_dir / "rows.json",
        [
            {
                "key": "r1",
                "cells": {
                    "f1": [
                        {"column": "f1:c1", "timestamp": 1000, "value": _b64(b"Hello!")},
                    ]
                },
            }
        ],
    )
    rows = load_rows(path)
    assert len(rows) == 1
    assert rows[0].key == "r1"
    assert rows[0].cells["f1"] == [
        Cell(row="r1", column="f1:c1", value=b"Hello!", timestamp=1000)
    ]


@pytest.mark.unit
def test_single_row_object(temp_dir):
    path = _write_rows(temp_dir / "rows.json", {"key": "r1", "cells": {}})
    rows = load_rows(path)
    assert [r.key for r in rows] == ["r1"]


@pytest.mark.unit
def test_binary_values_survive(temp_dir):
    raw = bytes(range(256))
    path = _write_rows(
        temp_dir / "rows.json",
        [{"key": "r", "cells": {"f": [{"column": "f:c", "value": _b64(raw)}]}}],
    )
    assert load_rows(path)[0].cells["f"][0].value == raw


@pytest.mark.unit
def test_file_not_found():
    with pytest.raises(InputError, match="Rows file not found"):
        load_rows("/nonexistent/rows.json")


@pytest.mark.unit
def test_malformed_json(temp_dir):
    path = temp_dir / "rows.json"
    path.write_text("[{")
    with pytest.raises(InputError, match="Malformed rows JSON"):
        load_rows(str(path))


@pytest.mark.unit
def test_bad_base64(temp_dir):
    path = _write_rows(
        temp_dir / "rows.json",
        [{"key": "r", "cells": {"f": [{"column": "f:c", "value": "***"}]}}],
    )
    with pytest.raises(InputError, match="Invalid cell"):
        load_rows(path)


@pytest.mark.unit
def test_missing_column(temp_dir):
    path = _write_rows(
        temp_dir / "rows.json",
        [{"key": "r", "cells": {"f": [{"value": ""}]}}],
    )
    with pytest.raises(InputError, match="Invalid cell"):
        load_rows(path)


@pytest.mark.unit
def test_rows_from_stdin():
    data = json.dumps([{"key": "r9", "cells": {}}])
    with patch("sys.stdin", io.StringIO(data)):
        rows = load_rows(None)
    assert rows[0].key == "r9"


@pytest.mark.unit
def test_no_source_on_tty():
    with patch("sys.stdin") as stdin:
        stdin.isatty.return_value = True
        with pytest.raises(InputError, match="No rows provided"):
            load_rows(None)
