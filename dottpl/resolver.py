"""
Field path resolution against context values.

A path such as ``user.address.city`` is resolved one segment at a time,
each segment being a named field of the value produced by the previous one.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable, Mapping
from typing import Any, List

from .errors import FieldNotFoundError, NotIterableError
from .protocols import FieldSource

logger = logging.getLogger(__name__)

# Marker for "field absent"; None is a legitimate field value
_MISSING = object()


def lookup_field(value: Any, name: str) -> Any:
    """
    Looks up one named field on a context value.

    Lookup order:
    1. FieldSource protocol (has_field/get_field)
    2. Mapping key
    3. Public attribute (dataclasses, pydantic models, plain objects)

    Methods are not fields: ``{{ .count }}`` on a list is absent rather
    than the bound method.

    Returns:
        Field value, or the module's missing marker if the field is absent
    """
    if isinstance(value, FieldSource):
        return value.get_field(name) if value.has_field(name) else _MISSING

    if isinstance(value, Mapping):
        return value.get(name, _MISSING)

    if name.startswith("_"):
        return _MISSING
    attr = getattr(value, name, _MISSING)
    if inspect.isroutine(attr):
        return _MISSING
    return attr


def resolve_path(context: Any, path: str) -> Any:
    """
    Resolves a dotted field path against a context value.

    Args:
        context: Value the path is relative to
        path: Dotted path without the leading dot, e.g. ``foo.bar``

    Returns:
        Value found at the end of the path

    Raises:
        FieldNotFoundError: If any segment is absent
    """
    current = context
    for segment in path.split("."):
        current = lookup_field(current, segment)
        if current is _MISSING:
            logger.debug(f"Segment '{segment}' of '{path}' not found on {type(context).__name__}")
            raise FieldNotFoundError(path, segment)
    return current


def resolve_sequence(context: Any, path: str) -> List[Any]:
    """
    Resolves a path that must produce an ordered collection of context values.

    Strings, bytes and mappings are iterable in Python but are not treated as
    collections of elements here.

    Raises:
        FieldNotFoundError: If any segment is absent
        NotIterableError: If the value is not a sequence of elements
    """
    value = resolve_path(context, path)
    if isinstance(value, (str, bytes, bytearray, Mapping)) or not isinstance(value, Iterable):
        raise NotIterableError(path, type(value).__name__)
    return list(value)


def is_truthy(value: Any) -> bool:
    """Truth value of a resolved field for {{ if }} blocks."""
    return bool(value)


__all__ = ["lookup_field", "resolve_path", "resolve_sequence", "is_truthy"]
