"""Process exit codes for cbt.

Each CbtError subclass carries one of these; run() exits with it.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    GENERAL_ERROR = 1
    USAGE_ERROR = 2
    # Rows file or stdin missing or malformed, bad --hex or --timezone
    INPUT_ERROR = 3
    OUTPUT_ERROR = 4
    # A stored value couldn't be decoded with its column's encoding
    FORMAT_ERROR = 5
    # Format file, protocol-buffer definitions or column settings invalid
    CONFIG_ERROR = 6
