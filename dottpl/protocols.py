"""
Protocols for the engine's collaborators.

The engine never builds context values or owns output streams; it only
needs these small capabilities from whatever the host application passes in.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class FieldSource(Protocol):
    """
    Context value with custom field lookup.

    Mappings and plain objects with attributes are supported without
    implementing this protocol; it exists for hosts whose data does not fit
    either shape (lazy records, proxies, database rows).
    """

    def has_field(self, name: str) -> bool:
        """Returns True if the value has a field with this name."""
        ...

    def get_field(self, name: str) -> Any:
        """Returns the field value; only called after has_field() returned True."""
        ...


@runtime_checkable
class OutputSink(Protocol):
    """
    Destination for rendered text.

    io.StringIO, text files and sys.stdout all qualify. Exceptions raised by
    write() abort the render and reach the caller unchanged.
    """

    def write(self, text: str) -> Any:
        ...


__all__ = ["FieldSource", "OutputSink"]
