"""Format-file configuration for cbt.

Handles the YAML format file used by the lookup and read commands to decide
how stored cell values are displayed.

Precedence order for a column's encoding and type (highest to lowest):
1. Column entry inside the column's family
2. Family defaults (default_encoding / default_type)
3. Top-level column entry (only when the family has no entry at all)
4. Global defaults
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from cbt_tool.core.exceptions import ConfigParseError


def _none_to_empty(v: Any, empty: Any) -> Any:
    return empty if v is None else v


class ColumnFormat(BaseModel):
    """Encoding and type for one column. Empty values inherit."""

    model_config = ConfigDict(extra="forbid")

    encoding: str = ""
    type: str = ""

    @field_validator("encoding", "type", mode="before")
    @classmethod
    def null_is_empty(cls, v: Any) -> Any:
        return _none_to_empty(v, "")


class FamilyFormat(BaseModel):
    """Defaults for a column family plus per-column overrides."""

    model_config = ConfigDict(extra="forbid")

    default_encoding: str = ""
    default_type: str = ""
    columns: dict[str, ColumnFormat] = {}

    @field_validator("default_encoding", "default_type", mode="before")
    @classmethod
    def null_is_empty(cls, v: Any) -> Any:
        return _none_to_empty(v, "")

    @field_validator("columns", mode="before")
    @classmethod
    def null_columns(cls, v: Any) -> Any:
        if v is None:
            return {}
        # A column listed with no body (``col:``) inherits everything.
        if isinstance(v, dict):
            return {k: ({} if c is None else c) for k, c in v.items()}
        return v


class FormatSettings(BaseModel):
    """Root of the format file."""

    model_config = ConfigDict(extra="forbid")

    default_encoding: str = ""
    default_type: str = ""
    protocol_buffer_definitions: list[str] = []
    protocol_buffer_paths: list[str] = []
    columns: dict[str, ColumnFormat] = {}
    families: dict[str, FamilyFormat] = {}

    @field_validator("default_encoding", "default_type", mode="before")
    @classmethod
    def null_is_empty(cls, v: Any) -> Any:
        return _none_to_empty(v, "")

    @field_validator("protocol_buffer_definitions", "protocol_buffer_paths", mode="before")
    @classmethod
    def null_list(cls, v: Any) -> Any:
        return _none_to_empty(v, [])

    @field_validator("columns", "families", mode="before")
    @classmethod
    def null_mapping(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {k: ({} if c is None else c) for k, c in v.items()}
        return v


def override(base: str, new: str) -> str:
    """Return ``new`` unless it is empty, in which case return ``base``."""
    if new:
        return new
    return base


def load_format_settings(path: str | Path | None) -> FormatSettings:
    """Load format settings from a YAML file.

    Returns empty FormatSettings when no path is given.
    Raises ConfigParseError on a missing or unreadable file, malformed YAML
    or unknown keys.
    """
    if not path:
        return FormatSettings()

    format_path = Path(path)
    try:
        text = format_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        msg = f"Format file not found: {format_path}"
        raise ConfigParseError(msg) from e
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Cannot read format file {format_path}: {e}"
        raise ConfigParseError(msg) from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        msg = f"Malformed YAML in {format_path}: {e}"
        raise ConfigParseError(msg) from e

    if data is None:
        return FormatSettings()
    if not isinstance(data, dict):
        msg = f"Invalid format file {format_path}: expected a mapping at the top level"
        raise ConfigParseError(msg)

    try:
        return FormatSettings.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid format file {format_path}: {e}"
        raise ConfigParseError(msg) from e
