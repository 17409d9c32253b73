"""Resolution and validation of column encodings and types.

A column's encoding and type come from the most specific setting that is
not empty: the column entry inside its family, then the family defaults,
then the global defaults. Top-level ``columns`` entries are only consulted
for families that have no entry of their own in ``families``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cbt_tool.core.config import override
from cbt_tool.core.exceptions import (
    ConfigError,
    FormatSettingsError,
    InvalidTypeForEncodingError,
    MissingTypeForEncodingError,
    UnknownTypeError,
)
from cbt_tool.formatting.encodings import EncodingKind, lookup_binary_type, lookup_encoding

if TYPE_CHECKING:
    from cbt_tool.core.config import FormatSettings
    from cbt_tool.formatting.schema import MessageTypeRegistry


def column_encoding_type(
    settings: FormatSettings, family: str, column: str
) -> tuple[str, str]:
    """Return the effective (encoding, type) names for ``family:column``."""
    default_encoding = settings.default_encoding
    default_type = settings.default_type

    fam = settings.families.get(family)
    if fam is not None:
        family_encoding = override(default_encoding, fam.default_encoding)
        family_type = override(default_type, fam.default_type)
        col = fam.columns.get(column)
        if col is not None:
            return (
                override(family_encoding, col.encoding),
                override(family_type, col.type),
            )
        return family_encoding, family_type

    col = settings.columns.get(column)
    if col is not None:
        return (
            override(default_encoding, col.encoding),
            override(default_type, col.type),
        )
    return default_encoding, default_type


def validate_type(
    column: str,
    kind: EncodingKind,
    encoding: str,
    type_name: str,
    message_types: MessageTypeRegistry,
) -> str:
    """Check that ``type_name`` suits the encoding and return the type to use.

    Binary types come back lower-cased. A protocol-buffer column with no
    type uses the column name as its message type.
    """
    if kind.is_binary:
        if not type_name:
            msg = f"no type specified for encoding: {encoding}"
            raise MissingTypeForEncodingError(msg)
        try:
            return lookup_binary_type(type_name).type_name
        except UnknownTypeError:
            msg = f"invalid type: {type_name} for encoding: {encoding}"
            raise InvalidTypeForEncodingError(msg) from None

    if kind is EncodingKind.PROTOCOL_BUFFER:
        if not type_name:
            type_name = column
        if type_name not in message_types:
            msg = f"invalid type: {type_name} for encoding: {encoding}"
            raise InvalidTypeForEncodingError(msg)

    return type_name


def validate_format(
    column: str,
    encoding: str,
    type_name: str,
    message_types: MessageTypeRegistry,
) -> tuple[EncodingKind, str]:
    """Validate an encoding/type pair for ``column`` (the bare qualifier)."""
    kind = lookup_encoding(encoding)
    return kind, validate_type(column, kind, encoding, type_name, message_types)


def validate_columns(settings: FormatSettings, message_types: MessageTypeRegistry) -> None:
    """Validate every column named in the settings.

    All problems are collected and raised together as one
    FormatSettingsError, top-level columns first, then family columns, each
    in the order they were declared.
    """
    default_encoding = settings.default_encoding
    default_type = settings.default_type

    problems: list[str] = []
    for cname, col in settings.columns.items():
        try:
            validate_format(
                cname,
                override(default_encoding, col.encoding),
                override(default_type, col.type),
                message_types,
            )
        except ConfigError as e:
            problems.append(f"{cname}: {e.message}")

    for fname, fam in settings.families.items():
        family_encoding = override(default_encoding, fam.default_encoding)
        family_type = override(default_type, fam.default_type)
        for cname, col in fam.columns.items():
            try:
                validate_format(
                    cname,
                    override(family_encoding, col.encoding),
                    override(family_type, col.type),
                    message_types,
                )
            except ConfigError as e:
                problems.append(f"{fname}:{cname}: {e.message}")

    if problems:
        raise FormatSettingsError(problems)
