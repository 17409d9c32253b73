"""Value formatting CLI commands."""

from __future__ import annotations

from typing import Annotated

import typer

from cbt_tool.cli.output import resolve_timezone, write_markdown, write_rows
from cbt_tool.core.exceptions import InputError
from cbt_tool.core.row_source import load_rows
from cbt_tool.formatting.engine import ValueFormatting

format_app = typer.Typer(help="Cell value formatting commands")

FORMAT_HELP = """\
# Custom data formatting for the `lookup` and `read` commands

You can provide custom formatting information for displaying stored cell
values. Each column is given an encoding and, for some encodings, a type.

## Encodings

- `Hex` (alias: `H`)
- `BigEndian` (aliases: `Binary`, `B`)
- `LittleEndian` (alias: `L`)
- `ProtocolBuffer` (aliases: `Protocol-Buffer`, `Protocol_Buffer`, `Proto`, `P`)
- `JSON` (alias: `J`)

Encoding names and aliases are case insensitive. Columns with no encoding
are shown as quoted strings.

`Hex` shows the raw bytes as hexadecimal and takes no type. `JSON` shows the
document indented, with object keys in alphabetical order.

`BigEndian` and `LittleEndian` need one of the types `int8`, `int16`,
`int32`, `int64`, `uint8`, `uint16`, `uint32`, `uint64`, `float32` or
`float64`. The stored length must be a multiple of the type size. Values
holding exactly one element are shown as scalars, others as arrays. Type
names are case insensitive.

`ProtocolBuffer` types must match (case insensitively) a message type
defined in the given protocol-buffer definition files, either by name or by
`package.Name`. With no type, the column name is used as the message type.

## Defaults

Encoding and type are given per column. Defaults may be given overall and
per column family. Family-level settings are only needed with several
families that need different defaults, or columns of the same name that
need different formats in different families.

## Format file

The YAML format file is passed with `--format-file`. It is an object with
these optional properties:

`default_encoding`
: The overall default encoding

`default_type`
: The overall default type

`protocol_buffer_definitions`
: Protocol-buffer files defining the available message types

`protocol_buffer_paths`
: Directories searched for definition files and their imports. Defaults to
  the current directory. Standard `google/protobuf/*` imports need no path.

`columns`
: Column names mapped to objects with `encoding` and `type` properties

`families`
: Family names mapped to objects with `default_encoding`, `default_type` and
  `columns` properties, the latter as for the top-level `columns`

Example:

```yaml
default_encoding: HEX
protocol_buffer_definitions:
  - MyProto.proto
protocol_buffer_paths:
  - mycode/stuff
columns:
  contact:
    encoding: ProtocolBuffer
    type: tutorial.Person
families:
  metrics:
    default_encoding: BigEndian
    default_type: INT64
    columns:
      ratio:
        type: float64
```
"""


@format_app.callback(invoke_without_command=True)
def format_callback(ctx: typer.Context) -> None:
    if not ctx.invoked_subcommand:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@format_app.command("check")
def format_check(
    format_file: Annotated[
        str,
        typer.Argument(help="Path to a YAML format file"),
    ],
) -> None:
    """Validate a format file and every column it declares."""
    formatting = ValueFormatting.setup(format_file)
    settings = formatting.settings
    column_count = len(settings.columns) + sum(
        len(fam.columns) for fam in settings.families.values()
    )
    typer.echo(f"Format file OK: {format_file}")
    typer.echo(f"  columns: {column_count}")
    typer.echo(f"  families: {len(settings.families)}")
    typer.echo(f"  message types: {len(formatting.message_types.keys())}")


@format_app.command("value")
def format_value(
    family: Annotated[str, typer.Argument(help="Column family of the value")],
    column: Annotated[str, typer.Argument(help="Column name as family:qualifier")],
    value: Annotated[str, typer.Argument(help="Value to format")],
    format_file: Annotated[
        str | None,
        typer.Option("--format-file", help="Path to a YAML format file"),
    ] = None,
    hex_value: Annotated[
        bool,
        typer.Option("--hex", help="VALUE is given as hexadecimal digits"),
    ] = False,
) -> None:
    """Format a single cell value."""
    if hex_value:
        try:
            data = bytes.fromhex(value)
        except ValueError as e:
            msg = f"Invalid hex value: {value}"
            raise InputError(msg) from e
    else:
        data = value.encode("utf-8")

    formatting = ValueFormatting.setup(format_file)
    typer.echo(formatting.format("", family, column, data), nl=False)


@format_app.command("render")
def format_render(
    rows_file: Annotated[
        str | None,
        typer.Argument(help="JSON rows export (default: stdin)"),
    ] = None,
    format_file: Annotated[
        str | None,
        typer.Option("--format-file", help="Path to a YAML format file"),
    ] = None,
    timezone: Annotated[
        str | None,
        typer.Option("--timezone", help="Time zone for timestamps (default: local)"),
    ] = None,
) -> None:
    """Print exported rows the way lookup and read display them."""
    tz = resolve_timezone(timezone)
    formatting = ValueFormatting.setup(format_file)
    rows = load_rows(rows_file)
    write_rows(formatting, rows, tz)


@format_app.command("help")
def format_help() -> None:
    """Describe the format file and the available encodings."""
    write_markdown(FORMAT_HELP)

