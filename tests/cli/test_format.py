"""Tests for the format command group."""

import base64
import json

import pytest

from cbt_tool.core.exceptions import (
    ConfigParseError,
    FormatSettingsError,
    InputError,
    JSONParseError,
    MalformedColumnNameError,
)
from tests.conftest import PERSON_BIN, TESTDATA

EPOCH = "1970/01/01-00:00:00.000000"


@pytest.fixture
def format_file(temp_dir):
    path = temp_dir / "formats.yml"
    path.write_text(
        "protocol_buffer_definitions:\n"
        "  - addressbook.proto\n"
        "protocol_buffer_paths:\n"
        f"  - {TESTDATA}\n"
        "columns:\n"
        "  person:\n"
        "    encoding: P\n"
        "  doc:\n"
        "    encoding: json\n"
        "families:\n"
        "  metrics:\n"
        "    default_encoding: B\n"
        "    default_type: int16\n"
    )
    return path


def _rows_json(*cells):
    return json.dumps(
        [
            {
                "key": "r1",
                "cells": {
                    "f1": [
                        {
                            "column": column,
                            "timestamp": 0,
                            "value": base64.b64encode(value).decode(),
                        }
                        for column, value in cells
                    ]
                },
            }
        ]
    )


@pytest.mark.unit
class TestFormatGroup:
    def test_no_subcommand_shows_help(self, cli_runner):
        result = cli_runner("format")
        assert result.exit_code == 0
        assert "check" in result.stdout
        assert "render" in result.stdout


@pytest.mark.unit
class TestFormatCheck:
    def test_valid_file(self, cli_runner, format_file):
        result = cli_runner("format", "check", str(format_file))
        assert result.exit_code == 0
        assert f"Format file OK: {format_file}" in result.stdout
        assert "columns: 2" in result.stdout
        assert "families: 1" in result.stdout
        assert "message types: 4" in result.stdout

    def test_misconfigured_columns(self, cli_runner):
        result = cli_runner("format", "check", str(TESTDATA / "missing_type.yml"))
        assert result.exit_code != 0
        assert isinstance(result.exception, FormatSettingsError)
        assert result.exception.problems == ["col1: no type specified for encoding: B"]

    def test_unknown_key(self, cli_runner):
        result = cli_runner("format", "check", str(TESTDATA / "unknown_key.yml"))
        assert isinstance(result.exception, ConfigParseError)

    def test_missing_file(self, cli_runner, temp_dir):
        result = cli_runner("format", "check", str(temp_dir / "nope.yml"))
        assert isinstance(result.exception, ConfigParseError)
        assert "not found" in result.exception.message


@pytest.mark.unit
class TestFormatValue:
    def test_unconfigured(self, cli_runner):
        result = cli_runner("format", "value", "f1", "f1:c1", "Hello world!")
        assert result.exit_code == 0
        assert result.stdout == '"Hello world!"\n'

    def test_hex_input(self, cli_runner, format_file):
        result = cli_runner(
            "format", "value", "metrics", "metrics:n", "0102",
            "--hex", "--format-file", str(format_file),
        )
        assert result.exit_code == 0
        assert result.stdout == "258\n"

    def test_protocol_buffer(self, cli_runner, format_file):
        result = cli_runner(
            "format", "value", "f1", "f1:person", PERSON_BIN.hex(),
            "--hex", "--format-file", str(format_file),
        )
        assert result.exit_code == 0
        assert result.stdout.startswith('name: "Jim"\nid: 42\n')

    def test_json(self, cli_runner, format_file):
        result = cli_runner(
            "format", "value", "f1", "f1:doc", '{"b": 1, "a": "x"}',
            "--format-file", str(format_file),
        )
        assert result.exit_code == 0
        assert result.stdout == 'a:      "x"\nb:     1.00\n'

    def test_bad_json(self, cli_runner, format_file):
        result = cli_runner(
            "format", "value", "f1", "f1:doc", "{oops",
            "--format-file", str(format_file),
        )
        assert isinstance(result.exception, JSONParseError)

    def test_bad_hex(self, cli_runner):
        result = cli_runner("format", "value", "f1", "f1:c1", "zz", "--hex")
        assert isinstance(result.exception, InputError)

    def test_bad_column_name(self, cli_runner):
        result = cli_runner("format", "value", "f1", "c1", "x")
        assert isinstance(result.exception, MalformedColumnNameError)


@pytest.mark.unit
class TestFormatRender:
    def test_render_file(self, cli_runner, temp_dir, format_file):
        rows = temp_dir / "rows.json"
        rows.write_text(_rows_json(("f1:c1", b"Hello!"), ("f1:person", PERSON_BIN)))
        result = cli_runner(
            "format", "render", str(rows),
            "--format-file", str(format_file), "--timezone", "UTC",
        )
        assert result.exit_code == 0
        lines = result.stdout.split("\n")
        assert lines[0] == "-" * 40
        assert lines[1] == "r1"
        assert lines[2] == f"  {'f1:c1':<40} @ {EPOCH}"
        assert lines[3] == '    "Hello!"'
        assert lines[4] == f"  {'f1:person':<40} @ {EPOCH}"
        assert lines[5] == '    name: "Jim"'
        assert result.stdout.endswith("    }\n\n")

    def test_render_stdin(self, cli_runner):
        result = cli_runner(
            "format", "render", "--timezone", "UTC",
            input=_rows_json(("f1:c1", b"\x01\x02")),
        )
        assert result.exit_code == 0
        assert result.stdout == (
            "-" * 40 + "\n"
            "r1\n"
            f"  {'f1:c1':<40} @ {EPOCH}\n"
            '    "\\x01\\x02"\n'
            "\n"
        )

    def test_unknown_timezone(self, cli_runner):
        result = cli_runner("format", "render", "--timezone", "Mars/Olympus", input="[]")
        assert isinstance(result.exception, InputError)

    def test_bad_rows(self, cli_runner):
        result = cli_runner("format", "render", input="not json")
        assert isinstance(result.exception, InputError)


@pytest.mark.unit
class TestFormatHelp:
    def test_help_text(self, cli_runner):
        result = cli_runner("format", "help")
        assert result.exit_code == 0
        assert "ProtocolBuffer" in result.stdout
        assert "protocol_buffer_definitions" in result.stdout
