"""Row models for cbt.

Pydantic models for the cells of a row as returned by a table read.
"""

from __future__ import annotations

from pydantic import BaseModel


class Cell(BaseModel):
    """One versioned value read from a row."""

    row: str
    column: str
    value: bytes = b""
    timestamp: int = 0


class Row(BaseModel):
    """A row: its key and the cells of each column family."""

    key: str
    cells: dict[str, list[Cell]] = {}
