"""Exception hierarchy for cbt.

All exceptions carry an exit_code for CLI return value mapping.
Configuration problems derive from ConfigError; problems with the stored
data being formatted derive from FormatError.
"""

from cbt_tool.core.exit_codes import ExitCode


class CbtError(Exception):
    """Base exception for all cbt errors."""

    exit_code: int = ExitCode.GENERAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InputError(CbtError):
    """File not found, invalid parameters."""

    exit_code: int = ExitCode.INPUT_ERROR


class ConfigError(CbtError):
    """Malformed format file, bad encodings or types."""

    exit_code: int = ExitCode.CONFIG_ERROR


class ConfigParseError(ConfigError):
    """Format file missing, unreadable or not matching the expected keys."""


class SchemaParseError(ConfigError):
    """Protocol-buffer definitions could not be compiled."""


class UnknownEncodingError(ConfigError):
    """Encoding name is not one of the supported encodings or aliases."""


class UnknownTypeError(ConfigError):
    """Binary type name is not one of the supported fixed-width types."""


class MissingTypeForEncodingError(ConfigError):
    """Encoding requires a type and none was given."""


class InvalidTypeForEncodingError(ConfigError):
    """Type is not valid for the chosen encoding."""


class FormatSettingsError(ConfigError):
    """Combined report of every column whose encoding/type is invalid."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        super().__init__("bad encoding and types:\n" + "\n".join(problems))


class FormatError(CbtError):
    """A stored value could not be formatted."""

    exit_code: int = ExitCode.FORMAT_ERROR


class MalformedColumnNameError(FormatError):
    """Column name is not of the form family:qualifier for the given family."""


class DecodeError(FormatError):
    """Value bytes could not be decoded with the resolved encoding."""


class ByteLengthMismatchError(DecodeError):
    """Value length is not a multiple of the binary element width."""


class ProtoDecodeError(DecodeError):
    """Value bytes are not a valid serialized protocol-buffer message."""


class JSONParseError(DecodeError):
    """Value bytes are not valid JSON."""
