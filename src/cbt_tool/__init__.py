"""cbt - command-line client tooling for wide-column table data."""

from cbt_tool.__about__ import __version__

__all__ = ["__version__"]
