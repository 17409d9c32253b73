"""Value formatter protocol and registry for cell value formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from cbt_tool.formatting.encodings import EncodingKind


@runtime_checkable
class ValueFormatter(Protocol):
    """Protocol for cell value formatters.

    Each formatter turns the raw bytes of one cell into display text.
    Formatters are built once per column and reused for every cell of that
    column, so they must not keep per-value state.
    """

    def format(self, value: bytes) -> str:
        """Transform raw cell bytes into text."""
        ...


class FormatterRegistry:
    """Registry for looking up formatter classes by encoding."""

    def __init__(self) -> None:
        self._formatters: dict[EncodingKind, type[ValueFormatter]] = {}

    def register(self, encoding: EncodingKind, formatter_class: type[ValueFormatter]) -> None:
        self._formatters[encoding] = formatter_class

    def get(self, encoding: EncodingKind, **kwargs: object) -> ValueFormatter:
        """Return a formatter instance for an encoding.

        Raises KeyError if no formatter is registered for the encoding.
        """
        if encoding not in self._formatters:
            available = ", ".join(sorted(e.value for e in self._formatters))
            msg = f"No formatter for encoding {encoding.value!r}. Available: {available}"
            raise KeyError(msg)
        return self._formatters[encoding](**kwargs)

    @property
    def available(self) -> list[EncodingKind]:
        return sorted(self._formatters, key=lambda e: e.value)


# Global registry instance populated by formatting.values.
registry = FormatterRegistry()
